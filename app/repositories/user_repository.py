"""사용자 레포지토리 — 사용자 CRUD 및 역할 집계 쿼리.

User Repository — CRUD and role aggregation queries for users.
Extends BaseRepository with email lookup and per-role counts.
"""

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User, UserRole
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다.

        Retrieve a user by exact email match. Emails are compared as stored.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 로그인 이메일 (Login email)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(User.email == email)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_users(self, db: AsyncSession) -> list[User]:
        """전체 사용자 목록 — 최근 가입순 (All users, newest first)."""
        query: Select = select(User).order_by(User.created_at.desc(), User.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_by_role(self, db: AsyncSession) -> dict[UserRole, int]:
        """역할별 사용자 수를 집계합니다.

        Count users grouped by role. Every role is present in the result,
        roles without users report zero.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)

        Returns:
            dict[UserRole, int]: 역할별 사용자 수 (User count per role)
        """
        query: Select = select(User.role, func.count(User.id)).group_by(User.role)
        result = await db.execute(query)

        counts: dict[UserRole, int] = {role: 0 for role in UserRole}
        for role, count in result.all():
            counts[UserRole(role)] = count
        return counts


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
