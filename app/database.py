"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Builds the async SQLAlchemy engine for DATABASE_URL (PostgreSQL via asyncpg
in deployment, SQLite via aiosqlite for local runs and tests), the session
factory, and the ORM base class.

Rating and store deletes rely on foreign key actions (ON DELETE CASCADE /
RESTRICT), so SQLite connections switch foreign key enforcement on.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite FK 강제 — 연결마다 PRAGMA 실행 (SQLite ignores FKs unless asked)."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """URL에 맞는 비동기 엔진을 생성합니다.

    Create the async engine for url.

    SQLite: single shared connection (StaticPool) so an in-memory database
    survives across sessions, with foreign keys enforced.
    Others: pool_pre_ping=True validates pooled connections before use.

    Args:
        url: SQLAlchemy 비동기 연결 URL (Async database URL)
        echo: SQL 로그 출력 여부 (Echo SQL statements)

    Returns:
        AsyncEngine: 비동기 엔진 (Configured async engine)
    """
    if url.startswith("sqlite"):
        eng: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(eng.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return eng

    return create_async_engine(url, echo=echo, pool_pre_ping=True)


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스 (Declarative base for User, Store, Rating)."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청마다 독립된 비동기 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields one async session per request.
    Each request is its own unit of work: routers commit explicitly, and
    anything left uncommitted when a request fails is rolled back on close.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
