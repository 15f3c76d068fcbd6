"""Document Service 도메인 서비스 레이어입니다. 문서 생성/조회/삭제 흐름을 캡슐화합니다."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError, translate_db_error
from app.models.document import Document
from app.services import version_service
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def get_document(db: Session, document_id: int) -> Document:
    doc = db.query(Document).filter(Document.document_id == document_id).first()
    if not doc:
        raise NotFoundError("문서를 찾을 수 없습니다.")
    return doc


def list_documents(db: Session) -> List[Document]:
    return (
        db.query(Document)
        .order_by(Document.updated_at.desc(), Document.document_id.desc())
        .all()
    )


def create_document(
    db: Session,
    *,
    title: str,
    created_by: int,
    content: Optional[Dict[str, Any]] = None,
) -> Document:
    normalized = (title or "").strip()
    if not normalized:
        raise ValidationError("문서 제목을 입력해 주세요.")
    now = utcnow()
    doc = Document(title=normalized, created_by=created_by, created_at=now, updated_at=now)
    try:
        db.add(doc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc
    db.refresh(doc)

    if content is not None:
        version_service.create_version(
            db,
            document_id=doc.document_id,
            content=content,
            created_by=created_by,
            change_type="create",
        )
        db.refresh(doc)
    return doc


def delete_document(db: Session, document_id: int) -> None:
    doc = get_document(db, document_id)
    try:
        # 버전은 개별 삭제하지 않고 문서와 함께 cascade 삭제된다.
        db.delete(doc)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc
    logger.info("[versions] document %s deleted with its history", document_id)
