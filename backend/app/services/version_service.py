"""문서 콘텐츠의 불변 버전 이력을 저장/조회하는 도메인 서비스입니다.

버전 번호는 문서 행의 ``last_version_number`` 를 원자적으로 증가시켜 발급한다.
``UPDATE ... SET n = n + 1`` 이 문서 행에 쓰기 잠금을 잡으므로 같은 문서에 대한
동시 저장은 커밋 순서대로 직렬화되고, 번호는 1..N 으로 빈틈 없이 이어진다.
"""

import copy
import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import NotFoundError, ValidationError, translate_db_error
from app.models.content_version import ContentVersion
from app.models.document import Document
from app.services import event_service
from app.utils.content_text import count_words, to_plain_text
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

CHANGE_TYPES = {"create", "update", "restore"}


def _validate(content: Any, quality_score: Optional[int], change_type: str) -> Dict[str, Any]:
    if not isinstance(content, dict):
        raise ValidationError("콘텐츠 스냅샷 형식이 올바르지 않습니다.")
    if quality_score is not None and (
        not isinstance(quality_score, int) or isinstance(quality_score, bool) or not 0 <= quality_score <= 100
    ):
        raise ValidationError("품질 점수는 0~100 사이여야 합니다.")
    if change_type not in CHANGE_TYPES:
        raise ValidationError(f"지원하지 않는 변경 유형입니다: {change_type}")
    return content


def create_version(
    db: Session,
    *,
    document_id: int,
    content: Dict[str, Any],
    created_by: int,
    quality_score: Optional[int] = None,
    change_type: str = "update",
    restored_from_version_id: Optional[int] = None,
) -> ContentVersion:
    snapshot = _validate(content, quality_score, change_type)
    serialized = json.dumps(snapshot, ensure_ascii=False)
    word_count = count_words(to_plain_text(snapshot))
    now = utcnow()

    try:
        # 트랜잭션의 첫 문장이 쓰기여야 문서 행 잠금을 커밋 시점까지 유지한다.
        bumped = db.execute(
            update(Document)
            .where(Document.document_id == document_id)
            .values(last_version_number=Document.last_version_number + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if bumped.rowcount == 0:
            db.rollback()
            raise NotFoundError("문서를 찾을 수 없습니다.")

        version_number = (
            db.query(Document.last_version_number)
            .filter(Document.document_id == document_id)
            .scalar()
        )
        row = ContentVersion(
            document_id=document_id,
            version_number=version_number,
            content=serialized,
            word_count=word_count,
            quality_score=quality_score,
            is_milestone=False,
            milestone_name=None,
            change_type=change_type,
            restored_from_version_id=restored_from_version_id,
            created_by=created_by,
        )
        db.add(row)
        db.flush()
        db.execute(
            update(Document)
            .where(Document.document_id == document_id)
            .values(current_version_id=row.version_id)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[versions] create failed for document %s: %s", document_id, exc)
        raise translate_db_error(exc) from exc

    db.refresh(row)
    logger.info(
        "[versions] document %s -> v%s (%s) by user %s",
        document_id,
        row.version_number,
        change_type,
        created_by,
    )
    event_service.publish_event(
        document_id,
        event_service.VERSION_CREATED,
        {
            "version_id": row.version_id,
            "version_number": row.version_number,
            "change_type": row.change_type,
            "created_by": row.created_by,
        },
    )
    return row


def _ensure_document(db: Session, document_id: int) -> None:
    exists = db.query(Document.document_id).filter(Document.document_id == document_id).first()
    if not exists:
        raise NotFoundError("문서를 찾을 수 없습니다.")


def list_versions(db: Session, *, document_id: int) -> List[ContentVersion]:
    _ensure_document(db, document_id)
    return (
        db.query(ContentVersion)
        .filter(ContentVersion.document_id == document_id)
        .order_by(ContentVersion.version_number.desc())
        .all()
    )


def get_version(db: Session, *, version_id: int, document_id: Optional[int] = None) -> ContentVersion:
    q = db.query(ContentVersion).filter(ContentVersion.version_id == version_id)
    if document_id is not None:
        q = q.filter(ContentVersion.document_id == document_id)
    row = q.first()
    if not row:
        raise NotFoundError("버전 이력을 찾을 수 없습니다.")
    return row


def get_current_version(db: Session, *, document_id: int) -> Optional[ContentVersion]:
    doc = db.query(Document).filter(Document.document_id == document_id).first()
    if not doc:
        raise NotFoundError("문서를 찾을 수 없습니다.")
    if doc.current_version_id is None:
        return None
    return get_version(db, version_id=doc.current_version_id, document_id=document_id)


def parse_content(row: ContentVersion) -> Dict[str, Any]:
    # 호출자가 수정해도 저장된 스냅샷에 영향이 없도록 매번 새로 파싱한다.
    try:
        parsed = json.loads(row.content or "{}")
    except json.JSONDecodeError:
        return {}
    return copy.deepcopy(parsed) if isinstance(parsed, dict) else {}


def to_response(row: ContentVersion) -> Dict[str, Any]:
    return {
        "version_id": row.version_id,
        "document_id": row.document_id,
        "version_number": row.version_number,
        "content": parse_content(row),
        "word_count": row.word_count or 0,
        "quality_score": row.quality_score,
        "is_milestone": bool(row.is_milestone),
        "milestone_name": row.milestone_name,
        "change_type": row.change_type,
        "restored_from_version_id": row.restored_from_version_id,
        "created_by": row.created_by,
        "created_at": row.created_at,
    }
