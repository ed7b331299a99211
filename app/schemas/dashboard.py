"""집계/대시보드 Pydantic 응답 스키마 정의.

Aggregate statistics and dashboard response schema definitions.
"""

from pydantic import BaseModel

from app.schemas.common import UserBrief
from app.schemas.rating import RatingResponse, ScoreCount


class UserSummary(BaseModel):
    """사용자 통계 — 전체 및 역할별 수 (GET /users/stats)."""

    count: int
    admin_count: int
    store_owner_count: int
    normal_user_count: int


class RankedStore(BaseModel):
    """평균 평점 순위 항목 (Entry of the top-rated store ranking)."""

    id: str
    name: str
    address: str | None
    average_rating: float
    rating_count: int
    owner: UserBrief | None = None


class StoreSummary(BaseModel):
    """매장 통계 — 전체 수 및 상위 매장 (GET /stores/stats)."""

    count: int
    top_rated: list[RankedStore]


class RatingSummary(BaseModel):
    """평점 통계 — 전체 수, 평균, 분포, 최근 평점 (GET /ratings/stats)."""

    count: int
    average_rating: float
    rating_distribution: list[ScoreCount]
    recent_ratings: list[RatingResponse]


class StoreInfo(BaseModel):
    id: str
    name: str
    address: str | None
    description: str | None


class StoreRatingStats(BaseModel):
    rating_count: int
    average_rating: float
    rating_distribution: list[ScoreCount]
    recent_ratings: list[RatingResponse]


class StoreStatsResponse(BaseModel):
    """매장별 통계 (GET /stores/{id}/stats) — 소유자 또는 관리자."""

    store: StoreInfo
    stats: StoreRatingStats


class RoleCounts(BaseModel):
    admin: int
    store_owner: int
    normal_user: int


class DashboardCounts(BaseModel):
    users: int
    stores: int
    ratings: int
    users_by_role: RoleCounts


class DashboardResponse(BaseModel):
    """관리자 대시보드 집계 (GET /dashboard/stats).

    Cross-entity view: counts, users by role, top-rated stores, recent ratings.
    """

    counts: DashboardCounts
    top_rated_stores: list[RankedStore]
    recent_ratings: list[RatingResponse]
