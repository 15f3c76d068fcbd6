"""버전에 이름 붙은 체크포인트(마일스톤)를 지정/해제/조회하는 도메인 서비스입니다."""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError, translate_db_error
from app.models.content_version import ContentVersion
from app.models.document import Document
from app.services import version_service

MAX_MILESTONE_NAME_LENGTH = 255


def _normalize_name(name: Optional[str]) -> str:
    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError("마일스톤 이름을 입력해 주세요.")
    if len(normalized) > MAX_MILESTONE_NAME_LENGTH:
        raise ValidationError(f"마일스톤 이름은 {MAX_MILESTONE_NAME_LENGTH}자 이하여야 합니다.")
    return normalized


def _save(db: Session, row: ContentVersion) -> ContentVersion:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc
    db.refresh(row)
    return row


def mark_milestone(
    db: Session,
    *,
    version_id: int,
    name: str,
    document_id: Optional[int] = None,
) -> ContentVersion:
    normalized = _normalize_name(name)
    row = version_service.get_version(db, version_id=version_id, document_id=document_id)
    if row.is_milestone and row.milestone_name == normalized:
        return row
    # 버전에서 변경 가능한 필드는 마일스톤 두 개뿐이다.
    row.is_milestone = True
    row.milestone_name = normalized
    return _save(db, row)


def unmark_milestone(db: Session, *, version_id: int, document_id: Optional[int] = None) -> ContentVersion:
    row = version_service.get_version(db, version_id=version_id, document_id=document_id)
    if not row.is_milestone and row.milestone_name is None:
        return row
    row.is_milestone = False
    row.milestone_name = None
    return _save(db, row)


def list_milestones(db: Session, *, document_id: int) -> List[ContentVersion]:
    exists = db.query(Document.document_id).filter(Document.document_id == document_id).first()
    if not exists:
        raise NotFoundError("문서를 찾을 수 없습니다.")
    return (
        db.query(ContentVersion)
        .filter(
            ContentVersion.document_id == document_id,
            ContentVersion.is_milestone == True,
        )
        .order_by(ContentVersion.version_number.desc())
        .all()
    )
