"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for the user, store and rating
repositories. Provides lookup by id, create/update/delete of an
already-resolved record, and equality-filtered count/exists.

Usage:
    class StoreRepository(BaseRepository[Store]):
        def __init__(self) -> None:
            super().__init__(Store)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository. Writes flush but never commit; routers own
    the transaction.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    def _where(self, query: Select, filters: dict[str, Any] | None) -> Select:
        """등호 필터 적용 — 모델에 없는 컬럼은 무시 (Apply column == value filters)."""
        for column_name, value in (filters or {}).items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)
        return query

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record. Unique and foreign key violations surface as
        sqlalchemy.exc.IntegrityError from the flush.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        update_data: dict[str, Any],
    ) -> ModelType:
        """이미 조회된 레코드를 업데이트합니다.

        Apply update_data to an already-resolved record. Callers resolve and
        authorize the record first, so this never looks it up again.
        """
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        db_obj: ModelType,
    ) -> None:
        """레코드를 삭제합니다 — 종속 행은 DB FK가 처리.

        Delete an already-resolved record. Dependent rows are handled by the
        foreign keys (CASCADE for ratings, RESTRICT for owned stores).
        """
        await db.delete(db_obj)
        await db.flush()

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다."""
        query: Select = self._where(select(self.model.id), filters).limit(1)
        return (await db.execute(query)).first() is not None

    async def count(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """조건에 맞는 레코드 수를 반환합니다.

        Count records matching the given equality filters, e.g.
        {"owner_id": user.id} for the stores a user owns.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 검색 조건 딕셔너리 (Filter criteria dictionary)

        Returns:
            int: 레코드 수 (Number of matching records)
        """
        query: Select = self._where(select(func.count()).select_from(self.model), filters)
        return (await db.execute(query)).scalar() or 0
