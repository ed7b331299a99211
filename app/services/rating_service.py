"""평점 서비스 — 평점 CRUD 및 평점 통계 비즈니스 로직.

Rating Service — Business logic for rating CRUD and rating statistics.
A normal user may rate each store once; the author or an admin may edit
or remove the rating.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.rating import Rating
from app.models.store import Store
from app.models.user import User
from app.repositories.rating_repository import rating_repository
from app.repositories.store_repository import store_repository
from app.schemas.common import StoreBrief, UserBrief
from app.schemas.dashboard import RatingSummary
from app.schemas.rating import RatingCreate, RatingResponse, RatingUpdate, ScoreCount
from app.services.authorization_service import Action, ResourceContext, actor_of, enforce
from app.utils.exceptions import DuplicateError, NotFoundError


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    """FK 위반 여부 (PostgreSQL and SQLite both name it in the message)."""
    return "foreign key" in str(exc.orig).lower()


class RatingService:
    """평점 관련 비즈니스 로직을 처리하는 서비스.

    Service handling rating business logic.
    """

    def to_response(
        self,
        rating: Rating,
        include_user: bool = True,
        include_store: bool = True,
    ) -> RatingResponse:
        """평점 모델을 응답 스키마로 변환합니다.

        Convert a Rating to a RatingResponse. Author and store summaries are
        only read when the caller's query loaded them.

        Args:
            rating: 평점 모델 (Rating model instance)
            include_user: 작성자 요약 포함 여부 (Embed author summary)
            include_store: 매장 요약 포함 여부 (Embed store summary)

        Returns:
            RatingResponse: 평점 응답 (Rating response)
        """
        user: User | None = rating.user if include_user else None
        store: Store | None = rating.store if include_store else None
        return RatingResponse(
            id=str(rating.id),
            score=rating.score,
            comment=rating.comment,
            user_id=str(rating.user_id),
            store_id=str(rating.store_id),
            created_at=rating.created_at,
            updated_at=rating.updated_at,
            user=UserBrief(id=str(user.id), name=user.name, email=user.email) if user else None,
            store=StoreBrief(id=str(store.id), name=store.name, address=store.address) if store else None,
        )

    async def distribution(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
    ) -> list[ScoreCount]:
        """점수 분포 (Score distribution, 5 down to 1)."""
        pairs = await rating_repository.score_distribution(db, store_id)
        return [ScoreCount(score=score, count=count) for score, count in pairs]

    async def recent(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
    ) -> list[RatingResponse]:
        """최근 평점 5건 (Five most recent ratings)."""
        ratings = await rating_repository.list_ratings(db, store_id=store_id, limit=settings.STATS_LIST_LIMIT)
        return [self.to_response(r) for r in ratings]

    async def average(
        self,
        db: AsyncSession,
        store_id: UUID | None = None,
    ) -> float:
        """평균 점수, 소수점 둘째 자리 (Mean score rounded to 2 decimals, 0 if none)."""
        return round(await rating_repository.average_score(db, store_id), 2)

    async def list_store_ratings(
        self,
        db: AsyncSession,
        store_id: UUID,
        current_user: User | None,
    ) -> list[RatingResponse]:
        """매장의 평점 목록을 조회합니다 (공개).

        List a store's ratings, newest first. Public.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
        """
        enforce(actor_of(current_user), Action.VIEW_STORE_RATINGS)

        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")

        ratings: list[Rating] = await rating_repository.list_ratings(db, store_id=store_id)
        return [self.to_response(r) for r in ratings]

    async def create_rating(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: RatingCreate,
        current_user: User,
    ) -> RatingResponse:
        """매장에 평점을 남깁니다.

        Rate a store. Only normal users may rate, once per store.
        The pre-check is backed by the uq_rating_user_store constraint,
        so a concurrent duplicate insert also ends as a conflict; a store
        deleted between lookup and insert ends as not found.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            data: 평점 생성 데이터 (Score and comment)
            current_user: 인증된 사용자 (Authenticated user)

        Returns:
            RatingResponse: 생성된 평점 (Created rating with author/store summaries)

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
            ForbiddenError: 일반 사용자가 아닐 때 (Caller is not a normal user)
            DuplicateError: 이미 평가한 매장일 때 (Store already rated by caller)
        """
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")

        existing: Rating | None = await rating_repository.get_by_user_and_store(
            db, current_user.id, store_id
        )
        enforce(
            actor_of(current_user),
            Action.CREATE_RATING,
            ResourceContext(already_rated=existing is not None),
        )

        try:
            rating: Rating = await rating_repository.create(
                db,
                {
                    "score": data.score,
                    "comment": data.comment,
                    "user_id": current_user.id,
                    "store_id": store_id,
                },
            )
        except IntegrityError as exc:
            await db.rollback()
            # 검사 이후 매장이 삭제된 경우 — Store removed after the lookup
            if _is_foreign_key_violation(exc):
                raise NotFoundError("Store not found")
            raise DuplicateError("You have already rated this store")

        detail: Rating | None = await rating_repository.get_detail(db, rating.id)
        return self.to_response(detail)

    async def _get_owned_rating(
        self,
        db: AsyncSession,
        rating_id: UUID,
        current_user: User,
        action: Action,
    ) -> Rating:
        """평점을 조회하고 작성자/관리자 권한을 확인합니다.

        Resolve a rating and check that the caller is its author or an admin.

        Raises:
            NotFoundError: 평점을 찾을 수 없을 때 (Rating not found)
            ForbiddenError: 작성자도 관리자도 아닐 때 (Neither author nor admin)
        """
        rating: Rating | None = await rating_repository.get_by_id(db, rating_id)
        if rating is None:
            raise NotFoundError("Rating not found")

        enforce(actor_of(current_user), action, ResourceContext(owner_id=rating.user_id))
        return rating

    async def update_rating(
        self,
        db: AsyncSession,
        rating_id: UUID,
        data: RatingUpdate,
        current_user: User,
    ) -> RatingResponse:
        """평점을 수정합니다 (작성자 또는 관리자).

        Update a rating's score and/or comment. Author or admin only.
        """
        rating: Rating = await self._get_owned_rating(db, rating_id, current_user, Action.UPDATE_RATING)

        update_data: dict = data.model_dump(exclude_unset=True)
        # 점수는 null로 지울 수 없음 — Score cannot be cleared
        if update_data.get("score") is None:
            update_data.pop("score", None)

        await rating_repository.update(db, rating, update_data)
        detail: Rating | None = await rating_repository.get_detail(db, rating_id)
        return self.to_response(detail)

    async def delete_rating(
        self,
        db: AsyncSession,
        rating_id: UUID,
        current_user: User,
    ) -> None:
        """평점을 삭제합니다 (작성자 또는 관리자).

        Delete a rating. Author or admin only.
        """
        rating: Rating = await self._get_owned_rating(db, rating_id, current_user, Action.DELETE_RATING)
        await rating_repository.delete(db, rating)

    async def list_all_ratings(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[RatingResponse]:
        """전체 평점 목록 (관리자 전용, All ratings, admin only)."""
        enforce(actor_of(current_user), Action.VIEW_ALL_RATINGS)
        ratings: list[Rating] = await rating_repository.list_ratings(db)
        return [self.to_response(r) for r in ratings]

    async def list_my_ratings(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> list[RatingResponse]:
        """내가 남긴 평점 목록 — 최신순 (Caller's own ratings, newest first)."""
        enforce(actor_of(current_user), Action.VIEW_OWN_RATINGS)
        ratings: list[Rating] = await rating_repository.list_ratings(db, user_id=current_user.id)
        return [self.to_response(r) for r in ratings]

    async def get_summary(
        self,
        db: AsyncSession,
        current_user: User,
    ) -> RatingSummary:
        """평점 통계 (관리자 전용).

        Rating statistics: total count, global average, distribution and
        recent ratings. Admin only.
        """
        enforce(actor_of(current_user), Action.VIEW_RATING_SUMMARY)
        return RatingSummary(
            count=await rating_repository.count(db),
            average_rating=await self.average(db),
            rating_distribution=await self.distribution(db),
            recent_ratings=await self.recent(db),
        )


# 싱글턴 인스턴스 — Singleton instance
rating_service: RatingService = RatingService()
