"""매장 관련 Pydantic 요청/응답 스키마 정의.

Store-related Pydantic request/response schema definitions.
average_rating and rating_count are derived on read, never accepted as input.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.common import UserBrief
from app.schemas.rating import RatingResponse


class StoreCreate(BaseModel):
    """매장 생성 요청 스키마.

    Store creation request. owner_id is honoured only for admins;
    otherwise the store is owned by the caller.

    Attributes:
        name: 매장 이름 (Store name)
        description: 매장 설명 (Description, optional)
        address: 매장 주소 (Address, optional)
        owner_id: 소유자 UUID (Owner to assign, admin only)
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    address: str | None = None
    owner_id: str | None = None


class StoreUpdate(BaseModel):
    """매장 수정 요청 스키마 (부분 업데이트).

    Store update request (partial). Changing owner_id reassigns the store
    and is admin only.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    address: str | None = None
    owner_id: str | None = None


class StoreResponse(BaseModel):
    """매장 응답 스키마 — 파생 평점 집계 포함.

    Store response with derived rating aggregates and owner summary.
    """

    id: str
    name: str
    description: str | None
    address: str | None
    owner_id: str
    owner: UserBrief | None = None
    average_rating: float = 0
    rating_count: int = 0
    created_at: datetime


class StoreDetailResponse(StoreResponse):
    """매장 상세 응답 — 평점 목록 포함 (Store detail with its ratings)."""

    ratings: list[RatingResponse] = []
