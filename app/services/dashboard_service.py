"""대시보드 서비스 — 관리자 대시보드 집계 비즈니스 로직.

Dashboard Service — Aggregation logic for the admin dashboard.
Combines entity counts, users by role, top-rated stores and recent ratings.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User, UserRole
from app.repositories.rating_repository import rating_repository
from app.repositories.store_repository import store_repository
from app.repositories.user_repository import user_repository
from app.schemas.dashboard import DashboardCounts, DashboardResponse, RoleCounts
from app.services.authorization_service import Action, actor_of, enforce
from app.services.rating_service import rating_service
from app.services.store_service import store_service


class DashboardService:
    """대시보드 서비스.

    Dashboard aggregation service for admin dashboard views.
    """

    async def get_stats(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> DashboardResponse:
        """관리자 대시보드 통계를 집계합니다.

        Aggregate dashboard statistics. Admin only; authorization runs
        before any query.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            current_user: 인증된 사용자 (Authenticated user)

        Returns:
            DashboardResponse: 수량, 역할별 사용자, 상위 매장, 최근 평점
                               (Counts, users by role, top-rated stores, recent ratings)

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Caller is not an admin)
        """
        enforce(actor_of(current_user), Action.VIEW_DASHBOARD)

        by_role: dict[UserRole, int] = await user_repository.count_by_role(db)
        top = await store_repository.top_rated(db, settings.STATS_LIST_LIMIT)

        return DashboardResponse(
            counts=DashboardCounts(
                users=sum(by_role.values()),
                stores=await store_repository.count(db),
                ratings=await rating_repository.count(db),
                users_by_role=RoleCounts(
                    admin=by_role[UserRole.ADMIN],
                    store_owner=by_role[UserRole.STORE_OWNER],
                    normal_user=by_role[UserRole.NORMAL_USER],
                ),
            ),
            top_rated_stores=[store_service.to_ranked(row) for row in top],
            recent_ratings=await rating_service.recent(db),
        )


# 싱글턴 인스턴스 — Singleton instance
dashboard_service: DashboardService = DashboardService()
