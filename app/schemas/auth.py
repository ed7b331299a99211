"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance, and password change.
"""

from pydantic import BaseModel, Field

from app.config import settings
from app.schemas.user import EmailAddress, UserResponse


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema.
    role is free text on purpose: only "store_owner" is honoured, every
    other value (including "admin") silently becomes normal_user.

    Attributes:
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email)
        password: 비밀번호 (Plain text, bcrypt-hashed on server)
        role: 요청 역할 (Requested role, optional)
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailAddress
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
    role: str | None = None


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Attributes:
        email: 로그인 이메일 (Login email)
        password: 비밀번호 (Plain text, compared to bcrypt hash)
    """

    email: str
    password: str


class PasswordUpdateRequest(BaseModel):
    """비밀번호 변경 요청 스키마.

    Self-service password change. current_password must match the stored hash.
    """

    current_password: str
    new_password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login or registration.

    Attributes:
        access_token: JWT 액세스 토큰 (Signed, time-limited bearer token)
        token_type: 토큰 유형 (Always "bearer")
        user: 인증된 사용자 (Authenticated user summary)
    """

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
