"""매장 SQLAlchemy ORM 모델 정의.

Store SQLAlchemy ORM model definition.

Tables:
    - stores: 평가 대상 매장 (Stores that users rate, each with one owner)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Store(Base):
    """매장 모델 — 소유자 한 명에게 귀속되는 평가 대상.

    Store model — Rated business owned exclusively by one user.
    average_rating / rating_count are derived from ratings on read, never stored.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 매장 이름 (Store name)
        description: 매장 설명 (Description, optional)
        address: 매장 주소 (Address, optional)
        owner_id: 소유자 FK (Owner user; RESTRICT — owner cannot be deleted while owning stores)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        owner: 소유자 (Owning user)
        ratings: 매장 평점 목록 (Ratings, cascade delete — no dangling ratings)
    """

    __tablename__ = "stores"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 소유자 FK — 소유자 삭제 제한 (RESTRICT: owner deletion refused while stores exist)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    owner = relationship("User", back_populates="stores")
    ratings = relationship("Rating", back_populates="store", cascade="all, delete-orphan", passive_deletes=True)
