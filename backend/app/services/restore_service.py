"""과거 버전을 새 현재 버전으로 다시 만드는 복원 서비스입니다.

복원은 항상 앞으로만 진행하는 추가(append)다. 대상 버전과 기존 이력은 그대로 두고
대상 콘텐츠의 사본으로 N+1 버전을 만든다. 이미 현재 버전인 대상을 복원해도
거부하지 않고 중복 스냅샷을 만든다.
"""

from sqlalchemy.orm import Session

from app.models.content_version import ContentVersion
from app.services import version_service


def restore_version(db: Session, *, document_id: int, version_id: int, user_id: int) -> ContentVersion:
    target = version_service.get_version(db, version_id=version_id, document_id=document_id)
    return version_service.create_version(
        db,
        document_id=document_id,
        content=version_service.parse_content(target),
        created_by=user_id,
        quality_score=target.quality_score,
        change_type="restore",
        restored_from_version_id=target.version_id,
    )
