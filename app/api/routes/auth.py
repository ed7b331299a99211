"""인증 라우터 — 회원가입, 로그인, 내 정보, 비밀번호 변경.

Auth Router — Registration, login, current-user profile and password change.
Register and login are public; the rest require a bearer token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, PasswordUpdateRequest, RegisterRequest, TokenResponse
from app.schemas.common import DataResponse, MessageResponse
from app.schemas.user import UserResponse
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=DataResponse[TokenResponse], status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DataResponse[TokenResponse]:
    """회원가입 — store_owner 요청 외에는 일반 사용자로 생성.

    Register a new account. Any requested role other than store_owner
    becomes normal_user.
    """
    result: TokenResponse = await auth_service.register(db, data)
    await db.commit()
    return DataResponse(data=result)


@router.post("/login", response_model=DataResponse[TokenResponse])
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DataResponse[TokenResponse]:
    """로그인 — 토큰과 사용자 정보 반환 (Log in and receive a token)."""
    result: TokenResponse = await auth_service.login(db, data)
    return DataResponse(data=result)


@router.get("/me", response_model=DataResponse[UserResponse])
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[UserResponse]:
    """현재 로그인한 사용자 정보 (Profile of the authenticated user)."""
    return DataResponse(data=await auth_service.get_me(current_user))


@router.put("/password", response_model=MessageResponse)
async def update_password(
    data: PasswordUpdateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """비밀번호 변경 — 현재 비밀번호 확인 필요.

    Change own password. The current password must match.
    """
    await auth_service.change_password(db, current_user, data)
    await db.commit()
    return MessageResponse(message="Password updated successfully")
