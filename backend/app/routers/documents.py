"""Documents 기능 API 라우터입니다. 문서/버전 이력/복원/비교/마일스톤 요청을 서비스 레이어로 위임합니다."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_editor, get_current_user
from app.models.user import User
from app.schemas.document import DocumentCreate, DocumentOut
from app.schemas.version import (
    ContentVersionOut,
    MilestoneRequest,
    VersionComparisonOut,
    VersionCreate,
)
from app.services import (
    diff_service,
    document_service,
    lock_service,
    milestone_service,
    restore_service,
    version_service,
)
from app.utils.permissions import is_admin

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("", response_model=List[DocumentOut])
def list_documents(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return document_service.list_documents(db)


@router.post("", response_model=DocumentOut)
def create_document(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    content = data.content.model_dump(exclude_unset=True) if data.content is not None else None
    return document_service.create_document(
        db,
        title=data.title,
        created_by=current_user.user_id,
        content=content,
    )


@router.get("/{document_id}", response_model=DocumentOut)
def get_document(document_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return document_service.get_document(db, document_id)


@router.delete("/{document_id}")
def delete_document(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    doc = document_service.get_document(db, document_id)
    if doc.created_by != current_user.user_id and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="작성자 또는 관리자만 문서를 삭제할 수 있습니다.")
    document_service.delete_document(db, document_id)
    return {"message": "삭제되었습니다."}


@router.get("/{document_id}/versions", response_model=List[ContentVersionOut])
def list_document_versions(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    versions = version_service.list_versions(db, document_id=document_id)
    return [version_service.to_response(row) for row in versions]


@router.post("/{document_id}/versions", response_model=ContentVersionOut)
def save_document_version(
    document_id: int,
    data: VersionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    # 에디터 저장 경로: 다른 사용자의 유효한 잠금이 있으면 409
    lock_service.ensure_can_write(db, document_id, current_user.user_id)
    row = version_service.create_version(
        db,
        document_id=document_id,
        content=data.content.model_dump(exclude_unset=True),
        created_by=current_user.user_id,
        quality_score=data.quality_score,
    )
    return version_service.to_response(row)


@router.get("/{document_id}/versions/{version_id}", response_model=ContentVersionOut)
def get_document_version(
    document_id: int,
    version_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    row = version_service.get_version(db, version_id=version_id, document_id=document_id)
    return version_service.to_response(row)


@router.post("/{document_id}/restore/{version_id}", response_model=ContentVersionOut)
def restore_document_version(
    document_id: int,
    version_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    lock_service.ensure_can_write(db, document_id, current_user.user_id)
    row = restore_service.restore_version(
        db,
        document_id=document_id,
        version_id=version_id,
        user_id=current_user.user_id,
    )
    return version_service.to_response(row)


@router.get("/{document_id}/compare", response_model=VersionComparisonOut)
def compare_document_versions(
    document_id: int,
    from_version_id: int = Query(...),
    to_version_id: int = Query(...),
    granularity: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return diff_service.compare_versions(
        db,
        document_id=document_id,
        from_version_id=from_version_id,
        to_version_id=to_version_id,
        granularity=granularity,
    )


@router.get("/{document_id}/milestones", response_model=List[ContentVersionOut])
def list_document_milestones(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows = milestone_service.list_milestones(db, document_id=document_id)
    return [version_service.to_response(row) for row in rows]


@router.put("/{document_id}/versions/{version_id}/milestone", response_model=ContentVersionOut)
def mark_version_milestone(
    document_id: int,
    version_id: int,
    data: MilestoneRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    row = milestone_service.mark_milestone(db, version_id=version_id, name=data.name, document_id=document_id)
    return version_service.to_response(row)


@router.delete("/{document_id}/versions/{version_id}/milestone", response_model=ContentVersionOut)
def unmark_version_milestone(
    document_id: int,
    version_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_editor),
):
    row = milestone_service.unmark_milestone(db, version_id=version_id, document_id=document_id)
    return version_service.to_response(row)
