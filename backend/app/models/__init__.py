"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.document import Document
from app.models.content_version import ContentVersion

__all__ = [
    "User",
    "Document",
    "ContentVersion",
]
