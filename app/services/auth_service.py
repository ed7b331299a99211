"""인증 서비스 — 회원가입, 로그인, 비밀번호 변경 비즈니스 로직.

Auth Service — Business logic for registration, login, the current-user
profile and self-service password change. Tokens are stateless signed
access tokens; there is no refresh or revocation.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.repositories.user_repository import user_repository
from app.schemas.auth import LoginRequest, PasswordUpdateRequest, RegisterRequest, TokenResponse
from app.schemas.user import UserResponse
from app.services.authorization_service import Action, actor_of, enforce, resolve_registration_role
from app.services.user_service import user_service
from app.utils.exceptions import DuplicateError, UnauthorizedError
from app.utils.jwt import create_access_token
from app.utils.password import hash_password, verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _issue_token(self, user: User) -> TokenResponse:
        """사용자에게 액세스 토큰을 발급합니다 (Issue an access token for user)."""
        return TokenResponse(
            access_token=create_access_token(user.id, user.role.value),
            user=user_service.to_response(user),
        )

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> TokenResponse:
        """회원가입을 처리합니다.

        Process self-registration. The requested role is honoured only when it
        is exactly "store_owner"; every other value silently becomes normal_user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            TokenResponse: 토큰 및 사용자 응답 (Token and user response)

        Raises:
            DuplicateError: 이메일이 이미 등록된 경우 (Email already registered)
        """
        enforce(None, Action.REGISTER)

        if await user_repository.exists(db, {"email": data.email}):
            raise DuplicateError("Email already registered")

        role: UserRole = resolve_registration_role(data.role)
        try:
            user: User = await user_repository.create(
                db,
                {
                    "name": data.name,
                    "email": data.email,
                    "password_hash": hash_password(data.password),
                    "role": role,
                },
            )
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Email already registered")

        return self._issue_token(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Process login. Unknown email and wrong password yield the same error.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 데이터 (Login request data)

        Returns:
            TokenResponse: 토큰 및 사용자 응답 (Token and user response)

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid credentials")

        return self._issue_token(user)

    async def get_me(self, user: User) -> UserResponse:
        """현재 로그인한 사용자 프로필을 반환합니다.

        Return the profile of the currently authenticated user.
        """
        enforce(actor_of(user), Action.VIEW_ME)
        return user_service.to_response(user)

    async def change_password(
        self,
        db: AsyncSession,
        user: User,
        data: PasswordUpdateRequest,
    ) -> None:
        """비밀번호를 변경합니다.

        Change the caller's own password after verifying the current one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 인증된 사용자 모델 (Authenticated user model)
            data: 현재/새 비밀번호 (Current and new password)

        Raises:
            UnauthorizedError: 현재 비밀번호가 틀린 경우 (Current password is incorrect)
        """
        enforce(actor_of(user), Action.CHANGE_OWN_PASSWORD)

        if not verify_password(data.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")

        await user_repository.update(db, user, {"password_hash": hash_password(data.new_password)})


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
