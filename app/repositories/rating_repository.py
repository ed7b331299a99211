"""평점 레포지토리 — 평점 CRUD 및 통계 쿼리.

Rating Repository — CRUD and statistics queries for ratings.
Extends BaseRepository with author/store eager loading, the
one-rating-per-user-per-store lookup and score aggregates.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.rating import MAX_SCORE, MIN_SCORE, Rating
from app.repositories.base import BaseRepository


class RatingRepository(BaseRepository[Rating]):
    """평점 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the ratings table.
    Aggregates accept an optional store_id to scope them to one store.
    """

    def __init__(self) -> None:
        """RatingRepository를 초기화합니다.

        Initialize the RatingRepository with the Rating model.
        """
        super().__init__(Rating)

    async def get_by_user_and_store(
        self,
        db: AsyncSession,
        user_id: UUID,
        store_id: UUID,
    ) -> Rating | None:
        """사용자가 매장에 남긴 평점을 조회합니다.

        Retrieve the rating a user left on a store, if any.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 작성자 ID (Author UUID)
            store_id: 매장 ID (Store UUID)

        Returns:
            Rating | None: 평점 또는 None (Existing rating or None)
        """
        query: Select = select(Rating).where(
            Rating.user_id == user_id, Rating.store_id == store_id
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_detail(
        self,
        db: AsyncSession,
        rating_id: UUID,
    ) -> Rating | None:
        """평점을 작성자/매장과 함께 조회합니다 (Rating with author and store loaded)."""
        query: Select = (
            select(Rating)
            .options(selectinload(Rating.user), selectinload(Rating.store))
            .where(Rating.id == rating_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_ratings(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
        user_id: UUID | None = None,
        limit: int | None = None,
    ) -> list[Rating]:
        """평점 목록을 최신순으로 조회합니다.

        Retrieve ratings newest first with author and store loaded,
        optionally scoped to a store or an author.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 필터 (Only ratings of this store)
            user_id: 작성자 필터 (Only ratings by this user)
            limit: 최대 개수 (Maximum number of ratings)

        Returns:
            list[Rating]: 평점 목록 (List of ratings)
        """
        query: Select = select(Rating).options(
            selectinload(Rating.user), selectinload(Rating.store)
        )
        if store_id is not None:
            query = query.where(Rating.store_id == store_id)
        if user_id is not None:
            query = query.where(Rating.user_id == user_id)

        query = query.order_by(Rating.created_at.desc(), Rating.id)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def average_score(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
    ) -> float:
        """평균 점수를 계산합니다.

        Compute the mean score, globally or for one store.
        Returns 0 when there are no ratings, never None.
        """
        query: Select = select(func.avg(Rating.score))
        if store_id is not None:
            query = query.where(Rating.store_id == store_id)

        average = (await db.execute(query)).scalar()
        return float(average) if average is not None else 0.0

    async def score_distribution(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
    ) -> list[tuple[int, int]]:
        """점수별 평점 수 분포를 계산합니다.

        Count ratings per score. Every score from MAX_SCORE down to
        MIN_SCORE is present, scores without ratings report zero.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 필터 (Scope to one store)

        Returns:
            list[tuple[int, int]]: 점수 내림차순 (점수, 개수) 목록
                                   ((score, count) pairs, descending score)
        """
        query: Select = select(Rating.score, func.count(Rating.id)).group_by(Rating.score)
        if store_id is not None:
            query = query.where(Rating.store_id == store_id)

        result = await db.execute(query)
        counts: dict[int, int] = {score: count for score, count in result.all()}
        return [(score, counts.get(score, 0)) for score in range(MAX_SCORE, MIN_SCORE - 1, -1)]


# 싱글턴 인스턴스 — Singleton instance
rating_repository: RatingRepository = RatingRepository()
