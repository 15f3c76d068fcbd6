"""Document 및 편집 잠금 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.schemas.version import StructuredContent


class DocumentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    # 전달하면 첫 버전(v1)을 함께 만든다.
    content: Optional[StructuredContent] = None


class DocumentOut(BaseModel):
    document_id: int
    title: str
    current_version_id: Optional[int] = None
    last_version_number: int
    locked_by: Optional[int] = None
    locked_at: Optional[datetime] = None
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LockStateOut(BaseModel):
    document_id: int
    is_locked: bool
    locked_by: Optional[int] = None
    locked_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    is_stale: bool = False


class LockReleaseOut(BaseModel):
    document_id: int
    released: bool
