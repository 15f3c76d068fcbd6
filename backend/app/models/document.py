"""편집 대상 문서(현재 버전 포인터 + 편집 잠금)의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Document(Base):
    __tablename__ = "documents"

    document_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    # 순환 FK를 피하기 위해 DB 제약 없이 서비스가 같은 트랜잭션에서 관리한다.
    current_version_id = Column(Integer, nullable=True)
    # 버전 번호 발급용 단조 증가 카운터
    last_version_number = Column(Integer, nullable=False, default=0, server_default="0")
    locked_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    locked_at = Column(DateTime, nullable=True)  # naive UTC
    created_by = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    # 콘텐츠가 바뀔 때만 서비스가 갱신한다 (잠금 변경은 제외).
    updated_at = Column(DateTime, server_default=func.now())

    creator = relationship("User", foreign_keys=[created_by], back_populates="documents")
    lock_holder = relationship("User", foreign_keys=[locked_by])
    versions = relationship(
        "ContentVersion",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ContentVersion.version_number.desc()",
    )

    __table_args__ = (
        Index("idx_document_updated", "updated_at"),
    )
