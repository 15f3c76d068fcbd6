"""FastAPI 애플리케이션 진입점. 미들웨어와 API 라우터를 등록하고 스키마를 준비합니다."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import auth, documents, locks

logging.getLogger("app").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    title="콘텐츠 버전 관리 서비스",
    description="문서 버전 이력, 편집 잠금, 버전 비교/복원/마일스톤을 제공하는 백엔드",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(documents.router)
app.include_router(locks.router)


@app.on_event("startup")
def ensure_schema():
    # 신규 배포 시 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health():
    return {"status": "ok"}
