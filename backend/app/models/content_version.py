"""문서 콘텐츠의 불변 스냅샷(버전)을 저장하는 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, SmallInteger, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class ContentVersion(Base):
    __tablename__ = "content_versions"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.document_id", ondelete="CASCADE"), nullable=False)
    version_number = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)  # JSON string
    word_count = Column(Integer, nullable=False, default=0)
    quality_score = Column(SmallInteger, nullable=True)
    is_milestone = Column(Boolean, nullable=False, default=False)
    milestone_name = Column(String(255), nullable=True)
    change_type = Column(String(20), nullable=False, default="update")  # create/update/restore
    restored_from_version_id = Column(Integer, nullable=True)
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    document = relationship("Document", back_populates="versions")
    author = relationship("User", back_populates="content_versions")

    __table_args__ = (
        UniqueConstraint("document_id", "version_number", name="uq_content_version_number"),
        CheckConstraint(
            "quality_score IS NULL OR (quality_score >= 0 AND quality_score <= 100)",
            name="ck_content_version_quality_score",
        ),
        Index("idx_content_version_milestone", "document_id", "is_milestone"),
    )
