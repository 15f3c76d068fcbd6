"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    event_service,
    version_service,
    lock_service,
    diff_service,
    milestone_service,
    restore_service,
    document_service,
)
