"""초기 데이터 시드 스크립트 — 계정, 매장, 평점 생성.

Seed script — Creates demo accounts for each role, two stores and three ratings.
Run this script once to bootstrap a development database.

Usage:
    python -m app.seed

Creates:
    - 관리자 계정: SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD (admin)
    - 매장 소유자: owner@example.com / owner123 (store_owner)
    - 일반 사용자 2명: user@example.com, user2@example.com / user123 (normal_user)
    - 2개 매장: "Tech Store", "Book Store" (owned by the store owner)
    - 3개 평점: Tech Store 5점과 3점, Book Store 4점 (three ratings)
"""

import asyncio

from sqlalchemy import select

from app.config import settings
from app.database import Base, async_session, engine
from app.models import Rating, Store, User, UserRole
from app.utils.password import hash_password


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts the demo accounts,
    stores and ratings.

    Idempotent: 관리자가 이미 있으면 건너뜁니다 (Skips if an admin already exists).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        result = await db.execute(select(User).where(User.role == UserRole.ADMIN).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        admin: User = User(
            name="Admin User",
            email=settings.SEED_ADMIN_EMAIL,
            password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
        )
        owner: User = User(
            name="Store Owner",
            email="owner@example.com",
            password_hash=hash_password("owner123"),
            role=UserRole.STORE_OWNER,
        )
        user: User = User(
            name="Normal User",
            email="user@example.com",
            password_hash=hash_password("user123"),
            role=UserRole.NORMAL_USER,
        )
        other: User = User(
            name="Another User",
            email="user2@example.com",
            password_hash=hash_password("user123"),
            role=UserRole.NORMAL_USER,
        )
        db.add_all([admin, owner, user, other])
        await db.flush()  # flush로 user id 생성 (Flush to generate user ids)

        tech: Store = Store(
            name="Tech Store",
            description="A store selling the latest tech gadgets",
            address="123 Tech St, Tech City",
            owner_id=owner.id,
        )
        books: Store = Store(
            name="Book Store",
            description="A store with a wide range of books",
            address="456 Book St, Book City",
            owner_id=owner.id,
        )
        db.add_all([tech, books])
        await db.flush()

        db.add_all([
            Rating(score=5, comment="Great tech products and service!", user_id=user.id, store_id=tech.id),
            Rating(score=4, comment="Good selection of books", user_id=user.id, store_id=books.id),
            Rating(score=3, comment="Average experience, could be better", user_id=other.id, store_id=tech.id),
        ])

        await db.commit()
        print(f"Seeded: admin={settings.SEED_ADMIN_EMAIL}, owner=owner@example.com, user=user@example.com")


if __name__ == "__main__":
    asyncio.run(seed())
