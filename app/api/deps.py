"""FastAPI 의존성 주입 모듈 — 인증.

FastAPI dependency injection module — Authentication.
Resolves the calling user from the bearer token. Role and ownership rules
are not checked here; services consult the authorization engine.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_access_token()이 서명, 만료, 토큰 유형을 검증
       (decode_access_token verifies signature, expiry and token type)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    5. 사용자가 삭제되었으면 401 (401 if the user no longer exists)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.user import User
from app.repositories.user_repository import user_repository
from app.utils.exceptions import UnauthorizedError
from app.utils.jwt import decode_access_token

# HTTP Bearer 토큰 추출기 — 헤더가 없어도 403 대신 직접 401 처리
# (Missing header is reported as 401 by get_current_user, not 403 by HTTPBearer)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def _resolve_user(
    credentials: HTTPAuthorizationCredentials | None,
    db: AsyncSession,
) -> User | None:
    """토큰에서 사용자를 조회합니다. 토큰이 없으면 None.

    Return the token's user, or None when no token was sent.

    Raises:
        UnauthorizedError: 토큰이 잘못되었거나 만료, 사용자 없음
                           (Malformed, expired or badly signed token, or unknown user)
    """
    if credentials is None:
        return None

    try:
        payload: dict = decode_access_token(credentials.credentials)
        user_id: UUID = UUID(str(payload["sub"]))
    except (jwt.InvalidTokenError, ValueError):
        raise UnauthorizedError()

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError()
    return user


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the bearer token and return the authenticated user.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰 없음, 잘못된 토큰, 사용자 없음
                           (Missing or invalid token, or user not found)
    """
    user: User | None = await _resolve_user(credentials, db)
    if user is None:
        raise UnauthorizedError()
    return user


async def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """공개 엔드포인트용 — 토큰이 있으면 사용자, 없으면 None.

    For public endpoints: the user when a token is sent, None otherwise.
    A token that is sent but invalid is still rejected with 401.
    """
    return await _resolve_user(credentials, db)
