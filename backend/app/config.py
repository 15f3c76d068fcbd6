"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./content_history.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Database
    # SQLite 쓰기 경합 시 대기 시간(초). 버전 번호 직렬화가 이 대기에 의존한다.
    DB_BUSY_TIMEOUT_SECONDS: float = 30.0

    # Edit lock
    # 하트비트 없이 비정상 종료된 편집 세션을 회수하기 위한 TTL
    LOCK_TTL_MINUTES: int = 30

    # Diff
    DIFF_DEFAULT_GRANULARITY: str = "word"

    # Realtime notifier (best-effort, at-most-once)
    REALTIME_ENABLED: bool = True
    REALTIME_QUEUE_SIZE: int = 100
    REALTIME_WEBHOOK_URL: Optional[str] = None
    REALTIME_TIMEOUT_SECONDS: float = 3.0

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
