"""매장 라우터 — 매장 조회/관리 및 매장 통계 엔드포인트.

Store Router — Store browsing, management and statistics endpoints.

Permission Matrix (역할별 권한 설계):
    - 매장 목록/상세 조회: 공개 (Public)
    - 매장 등록: store_owner, admin (owner_id 지정은 admin만)
    - 매장 수정/삭제, 매장별 통계: 해당 매장 소유자 또는 admin
    - 내 매장 목록: store_owner
    - 전체 매장 통계: admin
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_optional_user
from app.database import get_db
from app.models.user import User
from app.schemas.common import DataResponse, ListResponse, MessageResponse
from app.schemas.dashboard import StoreStatsResponse, StoreSummary
from app.schemas.store import StoreCreate, StoreDetailResponse, StoreResponse, StoreUpdate
from app.services.store_service import store_service

router: APIRouter = APIRouter()


@router.get("", response_model=ListResponse[StoreResponse])
async def list_stores(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> ListResponse[StoreResponse]:
    """매장 목록 — 평균 평점, 평점 수, 소유자 포함.

    List stores with average rating, rating count and owner. Public.
    """
    return ListResponse.of(await store_service.list_stores(db, current_user))


# 고정 경로는 /{store_id}보다 먼저 등록 — Fixed paths before /{store_id}
@router.get("/stats", response_model=DataResponse[StoreSummary])
async def get_stores_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[StoreSummary]:
    """전체 매장 통계 — 수량 및 상위 매장 (Store count and top-rated stores)."""
    return DataResponse(data=await store_service.get_summary(db, current_user))


@router.get("/owned", response_model=ListResponse[StoreDetailResponse])
async def list_owned_stores(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ListResponse[StoreDetailResponse]:
    """내 소유 매장 목록 — 평점 포함 (Caller's own stores with ratings)."""
    return ListResponse.of(await store_service.list_owned_stores(db, current_user))


@router.get("/{store_id}", response_model=DataResponse[StoreDetailResponse])
async def get_store(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User | None, Depends(get_optional_user)],
) -> DataResponse[StoreDetailResponse]:
    """매장 상세 — 평점 목록 포함 (Store detail with ratings). Public."""
    return DataResponse(data=await store_service.get_store(db, store_id, current_user))


@router.get("/{store_id}/stats", response_model=DataResponse[StoreStatsResponse])
async def get_store_stats(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[StoreStatsResponse]:
    """매장별 평점 통계 — 소유자 또는 관리자.

    Rating statistics of one store. Store owner or admin.
    """
    return DataResponse(data=await store_service.get_store_stats(db, store_id, current_user))


@router.post("", response_model=DataResponse[StoreResponse], status_code=201)
async def create_store(
    data: StoreCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[StoreResponse]:
    """새 매장을 생성합니다 (Create a store)."""
    result: StoreResponse = await store_service.create_store(db, data, current_user)
    await db.commit()
    return DataResponse(data=result)


@router.put("/{store_id}", response_model=DataResponse[StoreResponse])
async def update_store(
    store_id: UUID,
    data: StoreUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> DataResponse[StoreResponse]:
    """매장 정보를 수정합니다 (Update a store)."""
    result: StoreResponse = await store_service.update_store(db, store_id, data, current_user)
    await db.commit()
    return DataResponse(data=result)


@router.delete("/{store_id}", response_model=MessageResponse)
async def delete_store(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """매장을 삭제합니다 — 평점도 함께 삭제.

    Delete a store together with its ratings.
    """
    await store_service.delete_store(db, store_id, current_user)
    await db.commit()
    return MessageResponse(message="Store deleted successfully")
