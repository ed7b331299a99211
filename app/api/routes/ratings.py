"""평점 라우터 — 매장 평점 조회/작성 및 평점 관리 엔드포인트.

Rating Router — Store rating listing/creation and rating management.
Store-scoped routes live under /stores/{store_id}/ratings; the rest
under /ratings.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_optional_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.dashboard import RatingSummary
from app.schemas.rating import RatingCreate, RatingResponse, RatingUpdate
from app.services.rating_service import rating_service

router: APIRouter = APIRouter()


# ---------------------------------------------------------------------------
# 매장별 평점 — Store-scoped ratings
# ---------------------------------------------------------------------------

@router.get("/stores/{store_id}/ratings", response_model=ListResponse[RatingResponse])
async def list_store_ratings(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> ListResponse[RatingResponse]:
    """매장 평점 목록 — 최신순, 공개 (Ratings of a store, newest first)."""
    return ListResponse.of(await rating_service.list_store_ratings(db, store_id, current_user))


@router.post("/stores/{store_id}/ratings", response_model=DataResponse[RatingResponse], status_code=201)
async def create_rating(
    store_id: UUID,
    data: RatingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[RatingResponse]:
    """매장에 평점을 남깁니다 — 일반 사용자, 매장당 1회.

    Rate a store. Normal users only, once per store.
    """
    result: RatingResponse = await rating_service.create_rating(db, store_id, data, current_user)
    await db.commit()
    return DataResponse(data=result)


# ---------------------------------------------------------------------------
# 평점 관리 — Rating management
# ---------------------------------------------------------------------------

@router.get("/ratings", response_model=ListResponse[RatingResponse])
async def list_ratings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ListResponse[RatingResponse]:
    """전체 평점 목록 — 관리자 (All ratings, admin only)."""
    return ListResponse.of(await rating_service.list_all_ratings(db, current_user))


@router.get("/ratings/stats", response_model=DataResponse[RatingSummary])
async def get_rating_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[RatingSummary]:
    """평점 통계 — 관리자 (Rating statistics, admin only)."""
    return DataResponse(data=await rating_service.get_summary(db, current_user))


@router.get("/ratings/user", response_model=ListResponse[RatingResponse])
async def list_my_ratings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ListResponse[RatingResponse]:
    """내가 남긴 평점 목록 (Caller's own ratings, newest first)."""
    return ListResponse.of(await rating_service.list_my_ratings(db, current_user))


@router.put("/ratings/{rating_id}", response_model=DataResponse[RatingResponse])
async def update_rating(
    rating_id: UUID,
    data: RatingUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[RatingResponse]:
    """평점을 수정합니다 — 작성자 또는 관리자 (Author or admin)."""
    result: RatingResponse = await rating_service.update_rating(db, rating_id, data, current_user)
    await db.commit()
    return DataResponse(data=result)


@router.delete("/ratings/{rating_id}", response_model=MessageResponse)
async def delete_rating(
    rating_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """평점을 삭제합니다 — 작성자 또는 관리자 (Author or admin)."""
    await rating_service.delete_rating(db, rating_id, current_user)
    await db.commit()
    return MessageResponse(message="Rating deleted successfully")
