"""평점 SQLAlchemy ORM 모델 정의.

Rating SQLAlchemy ORM model definition.

Tables:
    - ratings: 사용자별 매장 평점 (One rating per user per store)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# 평점 허용 범위 — Allowed score range (inclusive)
MIN_SCORE: int = 1
MAX_SCORE: int = 5


class Rating(Base):
    """평점 모델 — 일반 사용자가 매장에 남기는 점수와 코멘트.

    Rating model — Score and optional comment left by a normal user on a store.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        score: 점수 1~5 (Integer score, MIN_SCORE..MAX_SCORE)
        comment: 코멘트 (Optional free text)
        user_id: 작성자 FK (Author, CASCADE)
        store_id: 매장 FK (Rated store, CASCADE)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_rating_user_store: 사용자-매장 당 평점 1개 (One rating per user per store)
        ck_rating_score_range: 점수 범위 (Score within MIN_SCORE..MAX_SCORE)
    """

    __tablename__ = "ratings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_rating_user_store"),
        CheckConstraint(f"score >= {MIN_SCORE} AND score <= {MAX_SCORE}", name="ck_rating_score_range"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="ratings")
    store = relationship("Store", back_populates="ratings")
