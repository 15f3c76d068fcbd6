"""버전 관리 코어의 오류 분류 체계입니다.

모든 오류는 HTTPException 하위 클래스라서 라우터가 별도 변환 없이 그대로 전파하면
FastAPI가 상태 코드와 detail을 응답으로 직렬화한다.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError


class VersioningError(HTTPException):
    """버전 관리 코어 경계에서 발생하는 분류된 오류의 기반 클래스."""

    status_code = 500
    message = "요청을 처리하지 못했습니다."

    def __init__(self, message: Optional[str] = None, detail: Any = None):
        self.message = message or self.message
        super().__init__(status_code=type(self).status_code, detail=detail or self.message)


class NotFoundError(VersioningError):
    status_code = 404
    message = "대상을 찾을 수 없습니다."


class ValidationError(VersioningError):
    status_code = 422
    message = "요청 값이 올바르지 않습니다."


class LockConflictError(VersioningError):
    status_code = 409
    message = "다른 사용자가 편집 중입니다."

    def __init__(self, held_by: int, locked_at: Optional[datetime] = None):
        self.held_by = held_by
        self.locked_at = locked_at
        super().__init__(
            detail={
                "message": self.message,
                "held_by": held_by,
                "locked_at": locked_at.isoformat() if locked_at else None,
            }
        )


class ConcurrencyError(VersioningError):
    status_code = 409
    message = "동시에 다른 변경이 저장되었습니다. 다시 시도해 주세요."


class StorageError(VersioningError):
    status_code = 503
    message = "저장소 처리 중 오류가 발생했습니다."


_UNIQUE_VERSION_MARKERS = ("uq_content_version_number", "content_versions.version_number")
_FOREIGN_KEY_MARKERS = ("foreign key constraint",)
_RETRYABLE_MARKERS = ("database is locked", "could not serialize", "deadlock detected")


def translate_db_error(exc: SQLAlchemyError) -> VersioningError:
    raw = str(getattr(exc, "orig", None) or exc)
    lowered = raw.lower()
    if isinstance(exc, IntegrityError) and any(marker in lowered for marker in _UNIQUE_VERSION_MARKERS):
        return ConcurrencyError()
    if isinstance(exc, IntegrityError) and any(marker in lowered for marker in _FOREIGN_KEY_MARKERS):
        return ValidationError("참조하는 사용자 또는 문서가 존재하지 않습니다.")
    if isinstance(exc, OperationalError) and any(marker in lowered for marker in _RETRYABLE_MARKERS):
        return ConcurrencyError()
    return StorageError()
