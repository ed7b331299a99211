"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and role SQLAlchemy ORM model definitions.
Roles form a closed enumeration; every user holds exactly one.

Tables:
    - users: 사용자 계정 (User accounts, globally unique email)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import DateTime, Enum, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class UserRole(str, enum.Enum):
    """사용자 역할 — 닫힌 열거형.

    Closed set of user roles. Registration can only ever yield
    NORMAL_USER or STORE_OWNER; ADMIN is granted by another admin or the seed.
    """

    ADMIN = "admin"
    NORMAL_USER = "normal_user"
    STORE_OWNER = "store_owner"


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier, immutable)
        name: 표시 이름 (Display name)
        email: 로그인 이메일 (Login email, unique, case-sensitive as stored)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password, never serialized)
        role: 사용자 역할 (UserRole)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        stores: 소유 매장 목록 (Stores owned by this user; deletion RESTRICTed)
        ratings: 작성한 평점 목록 (Ratings authored, cascade delete)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 이메일 — 전역 고유 (unique constraint backs the pre-insert duplicate check)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(
            UserRole,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
        default=UserRole.NORMAL_USER,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    stores = relationship("Store", back_populates="owner", passive_deletes="all")
    ratings = relationship("Rating", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
