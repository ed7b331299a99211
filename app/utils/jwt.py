"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT access token creation and verification. There are no refresh tokens;
an access token is valid until it expires.

JWT Payload Structure:
    {
        "sub": "user_uuid",       # 사용자 ID (User identifier)
        "role": "store_owner",    # 발급 시점의 역할 (Role at issue time, informational)
        "exp": 1234567890,        # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"          # 토큰 유형 (Token type discriminator)
    }

The role claim is never trusted for authorization: the user is re-read
from the database on every request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt

from app.config import settings

ACCESS_TOKEN_TYPE: str = "access"


def create_access_token(user_id: UUID | str, role: str) -> str:
    """사용자 ID와 역할로 JWT 액세스 토큰을 생성합니다.

    Generate a signed, time-limited JWT access token for a user.
    Token expires after JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 30 days).

    Args:
        user_id: 사용자 ID (User identifier, stored as "sub")
        role: 역할 값 (Role value, e.g. "normal_user")

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)

    Example:
        token = create_access_token(user.id, user.role.value)
    """
    expire: datetime = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 서명/만료를 검증합니다.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def decode_access_token(token: str) -> dict[str, Any]:
    """액세스 토큰을 검증하고 페이로드를 반환합니다.

    Verify signature and expiry, then require type "access" and a "sub"
    claim. Any failure raises jwt.InvalidTokenError.
    """
    payload: dict[str, Any] = decode_token(token)
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise jwt.InvalidTokenError("Not an access token")
    if not payload.get("sub"):
        raise jwt.InvalidTokenError("Token has no subject")
    return payload
