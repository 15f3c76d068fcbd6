"""콘텐츠 버전 이력/비교/마일스톤 요청·응답 계약을 위한 Pydantic 스키마입니다."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class QuoteBlock(BaseModel):
    text: str
    attribution: Optional[str] = None


class SectionBlock(BaseModel):
    heading: Optional[str] = None
    content: Optional[str] = None


class StructuredContent(BaseModel):
    """에디터가 저장하는 구조화 스냅샷. 알 수 없는 필드도 그대로 보존한다."""

    headline: Optional[str] = None
    subheadline: Optional[str] = None
    dateline: Optional[str] = None
    lead: Optional[str] = None
    body: Optional[List[str]] = None
    quotes: Optional[List[QuoteBlock]] = None
    boilerplate: Optional[str] = None
    isi: Optional[str] = None
    contact: Optional[str] = None
    title: Optional[str] = None
    introduction: Optional[str] = None
    sections: Optional[List[SectionBlock]] = None
    conclusion: Optional[str] = None
    cta: Optional[str] = None
    plain_text: Optional[str] = None
    html: Optional[str] = None

    model_config = {"extra": "allow"}


class VersionCreate(BaseModel):
    content: StructuredContent
    quality_score: Optional[int] = Field(None, ge=0, le=100)


class ContentVersionOut(BaseModel):
    version_id: int
    document_id: int
    version_number: int
    content: Dict[str, Any]
    word_count: int
    quality_score: Optional[int] = None
    is_milestone: bool
    milestone_name: Optional[str] = None
    change_type: str
    restored_from_version_id: Optional[int] = None
    created_by: int
    created_at: Optional[datetime] = None


class MilestoneRequest(BaseModel):
    name: str


class DiffSegmentOut(BaseModel):
    kind: Literal["unchanged", "added", "removed"]
    text: str


class DiffStatsOut(BaseModel):
    additions: int
    deletions: int
    total_changes: int


class VersionComparisonOut(BaseModel):
    granularity: str
    from_version: ContentVersionOut
    to_version: ContentVersionOut
    segments: List[DiffSegmentOut]
    stats: DiffStatsOut
