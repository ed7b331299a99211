"""사용자 서비스 — 관리자용 사용자 CRUD 및 사용자 통계 비즈니스 로직.

User Service — Business logic for admin user management and user statistics.
Every operation here is admin only; role checks run before any lookup so
non-admins never learn whether a user id exists.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.repositories.store_repository import store_repository
from app.repositories.user_repository import user_repository
from app.schemas.dashboard import UserSummary
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services.authorization_service import (
    OWNS_STORES_MESSAGE,
    Action,
    ResourceContext,
    actor_of,
    enforce,
)
from app.utils.exceptions import DuplicateError, NotFoundError
from app.utils.password import hash_password


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.
        The password hash is never exposed.

        Args:
            user: 사용자 모델 (User model instance)

        Returns:
            UserResponse: 사용자 응답 (User response)
        """
        return UserResponse(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            created_at=user.created_at,
        )

    async def _get_user(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[UserResponse]:
        """전체 사용자 목록을 조회합니다 (관리자 전용).

        List all users, newest first. Admin only.
        """
        enforce(actor_of(current_user), Action.LIST_USERS)
        users: list[User] = await user_repository.list_users(db)
        return [self.to_response(u) for u in users]

    async def get_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_user: User,
    ) -> UserResponse:
        """사용자 상세 정보를 조회합니다 (관리자 전용).

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        enforce(actor_of(current_user), Action.GET_USER)
        return self.to_response(await self._get_user(db, user_id))

    async def create_user(
        self,
        db: AsyncSession,
        data: UserCreate,
        current_user: User,
    ) -> UserResponse:
        """새 사용자를 생성합니다 (관리자 전용).

        Create a user with any role. Admin only.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 사용자 생성 데이터 (User creation data)
            current_user: 인증된 관리자 (Authenticated admin)

        Returns:
            UserResponse: 생성된 사용자 응답 (Created user response)

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            DuplicateError: 이메일이 이미 등록된 경우 (Email already registered)
        """
        enforce(actor_of(current_user), Action.CREATE_USER)

        if await user_repository.exists(db, {"email": data.email}):
            raise DuplicateError("Email already registered")

        try:
            user: User = await user_repository.create(
                db,
                {
                    "name": data.name,
                    "email": data.email,
                    "password_hash": hash_password(data.password),
                    "role": data.role,
                },
            )
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Email already registered")
        return self.to_response(user)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: UserUpdate,
        current_user: User,
    ) -> UserResponse:
        """사용자 정보를 수정합니다 (관리자 전용).

        Update name, email, role and/or password. Admin only.
        A changed email is checked for duplicates; a new password is re-hashed.

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            DuplicateError: 이메일이 이미 사용 중일 때 (Email already in use)
        """
        enforce(actor_of(current_user), Action.UPDATE_USER)
        user: User = await self._get_user(db, user_id)

        update_data: dict = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        new_email: str | None = update_data.get("email")
        if new_email is not None and new_email != user.email:
            if await user_repository.exists(db, {"email": new_email}):
                raise DuplicateError("Email already in use")

        password: str | None = update_data.pop("password", None)
        if password is not None:
            update_data["password_hash"] = hash_password(password)

        try:
            user = await user_repository.update(db, user, update_data)
        except IntegrityError:
            await db.rollback()
            raise DuplicateError("Email already in use")
        return self.to_response(user)

    async def delete_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_user: User,
    ) -> None:
        """사용자를 삭제합니다 (관리자 전용).

        Delete a user and, by cascade, their ratings. Refused with a
        conflict while the user still owns any store; the stores.owner_id
        RESTRICT foreign key backs the check.

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            DuplicateError: 매장을 소유한 사용자일 때 (User still owns stores)
        """
        actor = actor_of(current_user)
        enforce(actor, Action.DELETE_USER)
        user: User = await self._get_user(db, user_id)

        owned: int = await store_repository.count(db, {"owner_id": user.id})
        enforce(actor, Action.DELETE_USER, ResourceContext(owner_id=user.id, owned_store_count=owned))

        try:
            await user_repository.delete(db, user)
        except IntegrityError:
            await db.rollback()
            # 검사 이후 매장이 배정된 경우 — A store was assigned after the check
            raise DuplicateError(OWNS_STORES_MESSAGE)

    async def get_summary(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> UserSummary:
        """사용자 통계 — 전체 및 역할별 수 (관리자 전용).

        User statistics: total and per-role counts. Admin only.
        """
        enforce(actor_of(current_user), Action.VIEW_USER_SUMMARY)
        by_role: dict[UserRole, int] = await user_repository.count_by_role(db)
        return UserSummary(
            count=sum(by_role.values()),
            admin_count=by_role[UserRole.ADMIN],
            store_owner_count=by_role[UserRole.STORE_OWNER],
            normal_user_count=by_role[UserRole.NORMAL_USER],
        )


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
