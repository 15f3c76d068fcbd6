"""Auth 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.document import Document
from app.models.user import User
from app.schemas.document import DocumentOut
from app.schemas.user import LoginRequest, TokenResponse, UserOut
from app.services.auth_service import create_access_token, mock_sso_login

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_sso_login(db, request.emp_id)
    token = create_access_token(user.user_id)
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    # 잠금은 로그아웃과 무관하게 유지된다. 편집 세션 종료 시 클라이언트가 직접 해제한다.
    return {"message": "로그아웃 되었습니다."}


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/locks", response_model=List[DocumentOut])
def my_locked_documents(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # 비정상 종료 후 다시 접속한 편집자가 이어서 작업하거나 해제할 문서 목록
    return (
        db.query(Document)
        .filter(Document.locked_by == current_user.user_id)
        .order_by(Document.locked_at.desc())
        .all()
    )
