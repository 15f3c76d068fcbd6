"""문서 편집 잠금 API 라우터입니다. 획득/해제/강제 해제 요청을 잠금 서비스로 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_editor, get_current_user, require_roles
from app.models.user import User
from app.schemas.document import LockReleaseOut, LockStateOut
from app.services import lock_service

router = APIRouter(prefix="/api/documents/{document_id}/lock", tags=["locks"])


@router.get("", response_model=LockStateOut)
def get_lock(document_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return lock_service.get_lock_state(db, document_id)


@router.post("", response_model=LockStateOut)
def acquire_lock(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    return lock_service.acquire_lock(db, document_id, current_user.user_id)


@router.delete("", response_model=LockReleaseOut)
def release_lock(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    return lock_service.release_lock(db, document_id, current_user.user_id)


@router.post("/force-unlock", response_model=LockReleaseOut)
def force_unlock(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("admin")),
):
    return lock_service.force_unlock(db, document_id)
