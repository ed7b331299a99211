"""매장 레포지토리 — 매장 CRUD 및 평점 집계 쿼리.

Store Repository — CRUD and rating aggregate queries for stores.
average_rating / rating_count are computed with an explicit GROUP BY
over ratings joined to stores, never stored on the row.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.rating import Rating
from app.models.store import Store
from app.repositories.base import BaseRepository

# 매장 + 평균 평점 + 평점 수 (Store with its derived aggregates)
StoreWithStats = tuple[Store, float, int]


class StoreRepository(BaseRepository[Store]):
    """매장 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the stores table.
    Every read that feeds a response also returns the rating aggregates.
    """

    def __init__(self) -> None:
        """StoreRepository를 초기화합니다.

        Initialize the StoreRepository with the Store model.
        """
        super().__init__(Store)

    @staticmethod
    def _with_stats(order_by_average: bool = False) -> Select:
        """평점 집계가 포함된 기본 SELECT를 생성합니다.

        Build SELECT (Store, average, count) with an outer join on a grouped
        ratings subquery, so stores without ratings report 0 / 0.
        """
        stats = (
            select(
                Rating.store_id.label("store_id"),
                func.avg(Rating.score).label("average_rating"),
                func.count(Rating.id).label("rating_count"),
            )
            .group_by(Rating.store_id)
            .subquery()
        )
        average = func.coalesce(stats.c.average_rating, 0)
        query: Select = (
            select(
                Store,
                average.label("average_rating"),
                func.coalesce(stats.c.rating_count, 0).label("rating_count"),
            )
            .outerjoin(stats, stats.c.store_id == Store.id)
            .options(selectinload(Store.owner))
        )
        if order_by_average:
            query = query.order_by(average.desc(), Store.id)
        return query

    @staticmethod
    def _rows(result) -> list[StoreWithStats]:
        # AVG는 백엔드에 따라 Decimal로 반환됨 (asyncpg returns Decimal)
        return [(store, float(average), int(count)) for store, average, count in result.all()]

    async def list_with_stats(
        self,
        db: AsyncSession,
        owner_id: UUID | None = None,
        with_ratings: bool = False,
    ) -> list[StoreWithStats]:
        """매장 목록을 평점 집계와 함께 조회합니다.

        Retrieve stores, newest first, each with its average rating and
        rating count.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            owner_id: 소유자 필터 (Restrict to stores of this owner)
            with_ratings: 평점 목록과 작성자 로드 여부
                          (Also load each store's ratings with their authors)

        Returns:
            list[StoreWithStats]: (매장, 평균, 평점 수) 목록
                                  (List of (store, average, count))
        """
        query: Select = self._with_stats()
        if owner_id is not None:
            query = query.where(Store.owner_id == owner_id)
        if with_ratings:
            query = query.options(
                selectinload(Store.ratings).selectinload(Rating.user)
            ).execution_options(populate_existing=True)

        query = query.order_by(Store.created_at.desc(), Store.id)
        result = await db.execute(query)
        return self._rows(result)

    async def get_with_stats(
        self,
        db: AsyncSession,
        store_id: UUID,
        with_ratings: bool = False,
    ) -> StoreWithStats | None:
        """매장 단건을 평점 집계와 함께 조회합니다.

        Retrieve a single store with its aggregates, optionally with its
        ratings and their authors loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            with_ratings: 평점 목록 로드 여부 (Also load ratings with authors)

        Returns:
            StoreWithStats | None: (매장, 평균, 평점 수) 또는 None
        """
        query: Select = (
            self._with_stats()
            .where(Store.id == store_id)
            .execution_options(populate_existing=True)
        )
        if with_ratings:
            query = query.options(selectinload(Store.ratings).selectinload(Rating.user))

        result = await db.execute(query)
        rows = self._rows(result)
        return rows[0] if rows else None

    async def top_rated(
        self,
        db: AsyncSession,
        limit: int = 5,
    ) -> list[StoreWithStats]:
        """평균 평점 상위 매장을 조회합니다.

        Retrieve stores ranked strictly by descending average rating,
        regardless of how many ratings each has. Ties are broken by id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            limit: 최대 개수 (Maximum number of stores)

        Returns:
            list[StoreWithStats]: 순위순 (매장, 평균, 평점 수) 목록
        """
        query: Select = (
            self._with_stats(order_by_average=True)
            .limit(limit)
        )
        result = await db.execute(query)
        return self._rows(result)


# 싱글턴 인스턴스 — Singleton instance
store_repository: StoreRepository = StoreRepository()
