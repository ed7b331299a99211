"""사용자 관련 Pydantic 요청/응답 스키마 정의.

User-related Pydantic request/response schema definitions.
Used by the admin-only /users endpoints and embedded in auth responses.
password_hash is never part of any response schema.
"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, validate_email

from app.config import settings
from app.models.user import UserRole


def _email_as_entered(value: str) -> str:
    """EmailStr과 같은 규칙으로 검증하되 입력값을 그대로 유지합니다.

    Validate with the same rules as EmailStr (email-validator) but keep the
    address exactly as entered, since stored emails are case-sensitive.
    The "Name <addr>" form EmailStr tolerates is rejected.
    """
    _, normalized = validate_email(value)
    if normalized.lower() != value.lower():
        raise ValueError("value is not a valid email address")
    return value


EmailAddress = Annotated[str, AfterValidator(_email_as_entered)]


class UserCreate(BaseModel):
    """관리자 사용자 생성 요청 스키마.

    Admin user creation request. Any role may be assigned.

    Attributes:
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email, must be unique)
        password: 비밀번호 (Plain text, bcrypt-hashed on server)
        role: 역할 (Role, defaults to normal_user)
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailAddress
    password: str = Field(..., min_length=settings.PASSWORD_MIN_LENGTH)
    role: UserRole = UserRole.NORMAL_USER


class UserUpdate(BaseModel):
    """관리자 사용자 수정 요청 스키마 (부분 업데이트).

    Admin user update request (partial). Email changes are checked for duplicates;
    a new password is re-hashed.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailAddress | None = None
    password: str | None = Field(None, min_length=settings.PASSWORD_MIN_LENGTH)
    role: UserRole | None = None


class UserResponse(BaseModel):
    """사용자 응답 스키마 (Sanitized user representation)."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime
