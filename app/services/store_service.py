"""매장 서비스 — 매장 CRUD 및 매장 통계 비즈니스 로직.

Store Service — Business logic for store CRUD and store statistics.
Anyone may browse stores; store owners manage their own stores and
admins manage every store, including who owns it.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.rating import Rating
from app.models.store import Store
from app.models.user import User, UserRole
from app.repositories.rating_repository import rating_repository
from app.repositories.store_repository import StoreWithStats, store_repository
from app.repositories.user_repository import user_repository
from app.schemas.common import UserBrief
from app.schemas.dashboard import (
    RankedStore,
    StoreInfo,
    StoreRatingStats,
    StoreStatsResponse,
    StoreSummary,
)
from app.schemas.store import StoreCreate, StoreDetailResponse, StoreResponse, StoreUpdate
from app.services.authorization_service import Action, ResourceContext, actor_of, enforce
from app.services.rating_service import rating_service
from app.utils.exceptions import BadRequestError, NotFoundError

# 매장 소유 가능 역할 — Roles that may own a store
OWNER_ROLES: frozenset[UserRole] = frozenset({UserRole.STORE_OWNER, UserRole.ADMIN})


def _owner_brief(owner: User | None) -> UserBrief | None:
    if owner is None:
        return None
    return UserBrief(id=str(owner.id), name=owner.name, email=owner.email)


class StoreService:
    """매장 관련 비즈니스 로직을 처리하는 서비스.

    Service handling store business logic.
    """

    def _to_response(self, row: StoreWithStats) -> StoreResponse:
        """매장 + 집계 행을 응답 스키마로 변환합니다.

        Convert a (store, average, count) row to a StoreResponse.

        Args:
            row: (매장, 평균 평점, 평점 수) ((store, average, count))

        Returns:
            StoreResponse: 매장 응답 (Store response)
        """
        store, average, count = row
        return StoreResponse(
            id=str(store.id),
            name=store.name,
            description=store.description,
            address=store.address,
            owner_id=str(store.owner_id),
            owner=_owner_brief(store.owner),
            average_rating=round(average, 2),
            rating_count=count,
            created_at=store.created_at,
        )

    def _to_detail(self, row: StoreWithStats) -> StoreDetailResponse:
        """매장 상세 응답 — 평점 목록 최신순 포함 (Detail with ratings, newest first)."""
        store: Store = row[0]
        ratings: list[Rating] = sorted(store.ratings, key=lambda r: r.created_at, reverse=True)
        return StoreDetailResponse(
            **self._to_response(row).model_dump(),
            ratings=[rating_service.to_response(r, include_store=False) for r in ratings],
        )

    def to_ranked(self, row: StoreWithStats) -> RankedStore:
        """순위 항목으로 변환 (Convert a row to a top-rated ranking entry)."""
        store, average, count = row
        return RankedStore(
            id=str(store.id),
            name=store.name,
            address=store.address,
            average_rating=round(average, 2),
            rating_count=count,
            owner=_owner_brief(store.owner),
        )

    async def _resolve_owner(
        self,
        db: AsyncSession,
        owner_id: str,
    ) -> UUID:
        """지정된 소유자를 검증합니다.

        Validate an owner assignment: the user must exist and hold a role
        that may own stores.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            owner_id: 소유자 UUID 문자열 (Owner UUID as sent by the client)

        Returns:
            UUID: 검증된 소유자 ID (Validated owner id)

        Raises:
            BadRequestError: 잘못된 ID, 없는 사용자, 소유 불가 역할
                             (Malformed id, unknown user, or role that cannot own stores)
        """
        try:
            owner_uuid: UUID = UUID(owner_id)
        except ValueError:
            raise BadRequestError("Invalid owner_id")

        owner: User | None = await user_repository.get_by_id(db, owner_uuid)
        if owner is None or owner.role not in OWNER_ROLES:
            raise BadRequestError("Store owner must be an existing store owner or admin")
        return owner_uuid

    async def _get_with_stats(
        self,
        db: AsyncSession,
        store_id: UUID,
        with_ratings: bool = False,
    ) -> StoreWithStats:
        row: StoreWithStats | None = await store_repository.get_with_stats(db, store_id, with_ratings)
        if row is None:
            raise NotFoundError("Store not found")
        return row

    async def _get_store(self, db: AsyncSession, store_id: UUID) -> Store:
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return store

    async def list_stores(
        self,
        db: AsyncSession,
        current_user: User | None,
    ) -> list[StoreResponse]:
        """전체 매장 목록을 평점 집계와 함께 조회합니다 (공개).

        List every store with its average rating, rating count and owner
        summary. Public.
        """
        enforce(actor_of(current_user), Action.VIEW_STORES)
        rows: list[StoreWithStats] = await store_repository.list_with_stats(db)
        return [self._to_response(row) for row in rows]

    async def get_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        current_user: User | None,
    ) -> StoreDetailResponse:
        """매장 상세 정보를 평점 목록과 함께 조회합니다 (공개).

        Retrieve store detail with aggregates, owner and ratings. Public.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
        """
        enforce(actor_of(current_user), Action.VIEW_STORE)
        row: StoreWithStats = await self._get_with_stats(db, store_id, with_ratings=True)
        return self._to_detail(row)

    async def create_store(
        self,
        db: AsyncSession,
        data: StoreCreate,
        current_user: User,
    ) -> StoreResponse:
        """새 매장을 생성합니다.

        Create a store owned by the caller. An admin may instead name
        another owner through owner_id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 매장 생성 데이터 (Store creation data)
            current_user: 인증된 사용자 (Authenticated user)

        Returns:
            StoreResponse: 생성된 매장 응답 (Created store response)

        Raises:
            ForbiddenError: 소유자/관리자가 아니거나 비관리자가 타인을 소유자로 지정
                            (Caller may not create stores, or non-admin names another owner)
            BadRequestError: 소유자로 지정할 수 없는 사용자 (Invalid owner)
        """
        actor = actor_of(current_user)
        enforce(actor, Action.CREATE_STORE)

        owner_id: UUID = current_user.id
        if data.owner_id is not None and data.owner_id != str(current_user.id):
            enforce(actor, Action.ASSIGN_STORE_OWNER)
            owner_id = await self._resolve_owner(db, data.owner_id)

        store: Store = await store_repository.create(
            db,
            {
                "name": data.name,
                "description": data.description,
                "address": data.address,
                "owner_id": owner_id,
            },
        )
        return self._to_response(await self._get_with_stats(db, store.id))

    async def update_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: StoreUpdate,
        current_user: User,
    ) -> StoreResponse:
        """매장 정보를 수정합니다 (소유자 또는 관리자).

        Update a store. Owner or admin only; reassigning owner_id is admin only.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
            ForbiddenError: 소유자도 관리자도 아닐 때 (Neither owner nor admin)
            BadRequestError: 소유자로 지정할 수 없는 사용자 (Invalid owner)
        """
        store: Store = await self._get_store(db, store_id)
        actor = actor_of(current_user)
        enforce(actor, Action.UPDATE_STORE, ResourceContext(owner_id=store.owner_id))

        update_data: dict = data.model_dump(exclude_unset=True)
        # 이름/소유자는 null로 지울 수 없음 — name and owner cannot be cleared
        for field in ("name", "owner_id"):
            if update_data.get(field) is None:
                update_data.pop(field, None)

        if "owner_id" in update_data:
            if update_data["owner_id"] == str(store.owner_id):
                update_data.pop("owner_id")
            else:
                enforce(actor, Action.ASSIGN_STORE_OWNER)
                update_data["owner_id"] = await self._resolve_owner(db, update_data["owner_id"])

        await store_repository.update(db, store, update_data)
        return self._to_response(await self._get_with_stats(db, store_id))

    async def delete_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        current_user: User,
    ) -> None:
        """매장을 삭제합니다 — 평점도 함께 삭제 (소유자 또는 관리자).

        Delete a store and, by cascade, its ratings. Owner or admin only.
        """
        store: Store = await self._get_store(db, store_id)
        enforce(actor_of(current_user), Action.DELETE_STORE, ResourceContext(owner_id=store.owner_id))
        await store_repository.delete(db, store)

    async def list_owned_stores(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[StoreDetailResponse]:
        """내 소유 매장 목록 — 평점 및 집계 포함 (매장 소유자 전용).

        List the caller's own stores with ratings and aggregates.
        Store owners only.
        """
        enforce(actor_of(current_user), Action.VIEW_OWNED_STORES)
        rows: list[StoreWithStats] = await store_repository.list_with_stats(
            db, owner_id=current_user.id, with_ratings=True
        )
        return [self._to_detail(row) for row in rows]

    async def get_summary(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> StoreSummary:
        """매장 통계 — 전체 수 및 평균 평점 상위 5개 (관리자 전용).

        Store statistics: total count and top-rated stores. Admin only.
        """
        enforce(actor_of(current_user), Action.VIEW_STORE_SUMMARY)
        top: list[StoreWithStats] = await store_repository.top_rated(db, settings.STATS_LIST_LIMIT)
        return StoreSummary(
            count=await store_repository.count(db),
            top_rated=[self.to_ranked(row) for row in top],
        )

    async def get_store_stats(
        self,
        db: AsyncSession,
        store_id: UUID,
        current_user: User,
    ) -> StoreStatsResponse:
        """매장별 통계를 조회합니다 (소유자 또는 관리자).

        Per-store statistics: rating count, average, score distribution
        and recent ratings.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            current_user: 인증된 사용자 (Authenticated user)

        Returns:
            StoreStatsResponse: 매장 요약과 통계 (Store summary and statistics)

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
            ForbiddenError: 소유자도 관리자도 아닐 때 (Neither owner nor admin)
        """
        store: Store = await self._get_store(db, store_id)
        enforce(actor_of(current_user), Action.VIEW_STORE_STATS, ResourceContext(owner_id=store.owner_id))

        return StoreStatsResponse(
            store=StoreInfo(
                id=str(store.id),
                name=store.name,
                address=store.address,
                description=store.description,
            ),
            stats=StoreRatingStats(
                rating_count=await rating_repository.count(db, {"store_id": store_id}),
                average_rating=await rating_service.average(db, store_id),
                rating_distribution=await rating_service.distribution(db, store_id),
                recent_ratings=await rating_service.recent(db, store_id),
            ),
        )


# 싱글턴 인스턴스 — Singleton instance
store_service: StoreService = StoreService()
