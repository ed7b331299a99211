"""공통 Pydantic 응답 봉투 및 요약 스키마 정의.

Common Pydantic response envelopes and brief summary schemas.
Every endpoint answers with {"success": bool, "data" | "message", "count"?}.
Brief schemas are embedded in store and rating responses.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


# === 응답 봉투 (Response envelopes) ===

class DataResponse(BaseModel, Generic[T]):
    """단일 데이터 응답 봉투.

    Envelope for a single resource or aggregate payload.
    """

    success: bool = True
    data: T


class ListResponse(BaseModel, Generic[T]):
    """목록 응답 봉투 — 항목 수 포함.

    Envelope for collections; count mirrors len(data).
    """

    success: bool = True
    count: int
    data: list[T]

    @classmethod
    def of(cls, items: list[T]) -> "ListResponse[T]":
        return cls(count=len(items), data=items)


class MessageResponse(BaseModel):
    """메시지 응답 봉투 (Envelope for operations without a payload)."""

    success: bool = True
    message: str


# === 요약 (Brief summaries) ===

class UserBrief(BaseModel):
    """사용자 요약 — 매장 소유자, 평점 작성자 표시용.

    User summary embedded in store owner and rating author fields.
    """

    id: str
    name: str
    email: str | None = None


class StoreBrief(BaseModel):
    """매장 요약 — 평점 목록에 포함 (Store summary embedded in ratings)."""

    id: str
    name: str
    address: str | None = None
