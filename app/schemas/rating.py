"""평점 관련 Pydantic 요청/응답 스키마 정의.

Rating-related Pydantic request/response schema definitions.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.models.rating import MAX_SCORE, MIN_SCORE
from app.schemas.common import StoreBrief, UserBrief


class RatingCreate(BaseModel):
    """평점 생성 요청 스키마.

    Rating creation request. store_id comes from the URL path.

    Attributes:
        score: 점수 (Integer MIN_SCORE..MAX_SCORE)
        comment: 코멘트 (Optional free text)
    """

    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    comment: str | None = None


class RatingUpdate(BaseModel):
    """평점 수정 요청 스키마 (부분 업데이트).

    Rating update request (partial). Only score and comment are mutable.
    """

    score: int | None = Field(None, ge=MIN_SCORE, le=MAX_SCORE)
    comment: str | None = None


class RatingResponse(BaseModel):
    """평점 응답 스키마.

    Rating response with optional author and store summaries,
    filled in when the query loaded them.
    """

    id: str
    score: int
    comment: str | None
    user_id: str
    store_id: str
    created_at: datetime
    updated_at: datetime
    user: UserBrief | None = None
    store: StoreBrief | None = None


class ScoreCount(BaseModel):
    """점수별 개수 — 평점 분포 항목 (One bucket of the score distribution)."""

    score: int
    count: int
