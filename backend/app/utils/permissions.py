from fastapi import HTTPException

from app.models.user import User

EDITOR_ROLES = {"admin", "editor"}


def is_admin(user: User) -> bool:
    return user is not None and user.role == "admin"


def can_edit(user: User) -> bool:
    return user is not None and user.role in EDITOR_ROLES


def ensure_can_edit(user: User) -> None:
    if not can_edit(user):
        raise HTTPException(status_code=403, detail="열람 권한 사용자는 문서를 변경할 수 없습니다.")
