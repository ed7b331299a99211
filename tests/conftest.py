"""테스트 인프라 — 테스트 DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Test DB, session, and httpx client fixtures.
TEST_DATABASE_URL selects the database (e.g. a throwaway PostgreSQL
database); by default an in-memory SQLite database via aiosqlite is used.
Schema is created before and dropped after each test.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.database import Base, build_engine, get_db
from app.main import app
from app.models import Rating, Store, User, UserRole
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 스키마를 생성하고 종료 시 삭제합니다."""
    eng: AsyncEngine = build_engine(TEST_DATABASE_URL)

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    role: UserRole,
    password: str = "secret123",
) -> User:
    """테스트 사용자를 생성합니다."""
    user = User(name=name, email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def create_store(db: AsyncSession, owner: User, name: str = "Coffee Shop") -> Store:
    """테스트 매장을 생성합니다."""
    s = Store(name=name, description="Test description", address="123 Main St", owner_id=owner.id)
    db.add(s)
    await db.flush()
    await db.refresh(s)
    return s


async def create_rating(db: AsyncSession, user: User, store: Store, score: int, comment: str | None = None) -> Rating:
    """테스트 평점을 생성합니다."""
    r = Rating(score=score, comment=comment, user_id=user.id, store_id=store.id)
    db.add(r)
    await db.flush()
    await db.refresh(r)
    return r


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token(user.id, user.role.value)


async def role_token(db: AsyncSession, role: UserRole) -> str:
    """주어진 역할의 호출자를 만들고 토큰을 반환합니다 (Caller of the given role)."""
    slug = role.value.replace("_", "-")
    user = await create_user(db, f"Caller {slug}", f"caller-{slug}@test.com", role)
    return make_token(user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 역할별 사용자, 매장
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await create_user(db, "Test Admin", "admin@test.com", UserRole.ADMIN, "admin123!")


@pytest_asyncio.fixture
async def owner_user(db: AsyncSession) -> User:
    """매장 소유자 Bob을 생성합니다."""
    return await create_user(db, "Bob", "bob@test.com", UserRole.STORE_OWNER, "owner123!")


@pytest_asyncio.fixture
async def other_owner(db: AsyncSession) -> User:
    """다른 매장 소유자를 생성합니다."""
    return await create_user(db, "Carol", "carol@test.com", UserRole.STORE_OWNER, "owner123!")


@pytest_asyncio.fixture
async def normal_user(db: AsyncSession) -> User:
    """일반 사용자 Alice를 생성합니다."""
    return await create_user(db, "Alice", "alice@test.com", UserRole.NORMAL_USER, "user123!")


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    """다른 일반 사용자를 생성합니다."""
    return await create_user(db, "Dave", "dave@test.com", UserRole.NORMAL_USER, "user123!")


@pytest_asyncio.fixture
async def store(db: AsyncSession, owner_user: User) -> Store:
    """Bob 소유의 테스트 매장을 생성합니다."""
    return await create_store(db, owner_user)


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def owner_token(owner_user) -> str:
    return make_token(owner_user)


@pytest.fixture
def other_owner_token(other_owner) -> str:
    return make_token(other_owner)


@pytest.fixture
def user_token(normal_user) -> str:
    return make_token(normal_user)


@pytest.fixture
def other_user_token(other_user) -> str:
    return make_token(other_user)
