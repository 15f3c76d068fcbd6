"""문서 편집 잠금(단일 보유자, TTL 만료)을 관리하는 도메인 서비스입니다.

잠금은 협조적(advisory)이다. 저장 경로는 ``ensure_can_write`` 로 보유 여부를 확인하고,
버전 저장소 자체는 잠금을 검사하지 않는다. 만료 판정은 획득 시점에 지연 평가하며
별도의 정리 작업은 없다.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.errors import ConcurrencyError, LockConflictError, NotFoundError, translate_db_error
from app.models.document import Document
from app.services import event_service
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

LOCK_TTL = timedelta(minutes=settings.LOCK_TTL_MINUTES)


def is_stale(locked_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    if locked_at is None:
        return True
    return (now or utcnow()) - locked_at > LOCK_TTL


def _lock_row(db: Session, document_id: int):
    row = (
        db.query(Document.document_id, Document.locked_by, Document.locked_at)
        .filter(Document.document_id == document_id)
        .first()
    )
    if not row:
        raise NotFoundError("문서를 찾을 수 없습니다.")
    return row


def _state(document_id: int, locked_by: Optional[int], locked_at: Optional[datetime], now: datetime) -> Dict[str, Any]:
    if locked_by is None:
        return {
            "document_id": document_id,
            "is_locked": False,
            "locked_by": None,
            "locked_at": None,
            "expires_at": None,
            "is_stale": False,
        }
    return {
        "document_id": document_id,
        "is_locked": True,
        "locked_by": locked_by,
        "locked_at": locked_at,
        "expires_at": locked_at + LOCK_TTL if locked_at else None,
        "is_stale": is_stale(locked_at, now),
    }


def get_lock_state(db: Session, document_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    row = _lock_row(db, document_id)
    return _state(document_id, row.locked_by, row.locked_at, now or utcnow())


def acquire_lock(db: Session, document_id: int, user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    previous = _lock_row(db, document_id)
    try:
        # 비어 있음 / 본인 보유(갱신) / 만료된 타인 보유(축출) 중 하나일 때만 갱신된다.
        result = db.execute(
            update(Document)
            .where(
                Document.document_id == document_id,
                or_(
                    Document.locked_by.is_(None),
                    Document.locked_by == user_id,
                    Document.locked_at.is_(None),
                    Document.locked_at < now - LOCK_TTL,
                ),
            )
            .values(locked_by=user_id, locked_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            holder = _lock_row(db, document_id)
            if holder.locked_by is None:
                # 조건 평가와 조회 사이에 해제된 경우. 호출자가 재시도하면 된다.
                raise ConcurrencyError()
            raise LockConflictError(held_by=holder.locked_by, locked_at=holder.locked_at)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc

    displaced = previous.locked_by if previous.locked_by not in (None, user_id) else None
    if displaced is not None:
        logger.info("[locks] document %s: stale lock of user %s displaced by %s", document_id, displaced, user_id)
    if previous.locked_by != user_id:
        event_service.publish_event(
            document_id,
            event_service.LOCK_CHANGED,
            {"locked_by": user_id, "locked_at": now.isoformat(), "displaced": displaced},
        )
    return _state(document_id, user_id, now, now)


def release_lock(db: Session, document_id: int, user_id: int) -> Dict[str, Any]:
    _lock_row(db, document_id)
    try:
        # 본인 보유일 때만 해제한다. 지연/중복 해제 요청이 새 보유자를 밀어내지 않는다.
        result = db.execute(
            update(Document)
            .where(Document.document_id == document_id, Document.locked_by == user_id)
            .values(locked_by=None, locked_at=None)
            .execution_options(synchronize_session=False)
        )
        released = result.rowcount > 0
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc

    if released:
        event_service.publish_event(
            document_id,
            event_service.LOCK_CHANGED,
            {"locked_by": None, "released_by": user_id},
        )
    return {"document_id": document_id, "released": released}


def force_unlock(db: Session, document_id: int) -> Dict[str, Any]:
    previous = _lock_row(db, document_id)
    try:
        db.execute(
            update(Document)
            .where(Document.document_id == document_id)
            .values(locked_by=None, locked_at=None)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise translate_db_error(exc) from exc

    if previous.locked_by is not None:
        logger.info("[locks] document %s: lock of user %s force-released", document_id, previous.locked_by)
        event_service.publish_event(
            document_id,
            event_service.LOCK_CHANGED,
            {"locked_by": None, "forced": True, "previous_holder": previous.locked_by},
        )
    return {"document_id": document_id, "released": previous.locked_by is not None}


def ensure_can_write(db: Session, document_id: int, user_id: int, now: Optional[datetime] = None) -> None:
    row = _lock_row(db, document_id)
    if row.locked_by is None or row.locked_by == user_id:
        return
    if is_stale(row.locked_at, now):
        return
    raise LockConflictError(held_by=row.locked_by, locked_at=row.locked_at)
