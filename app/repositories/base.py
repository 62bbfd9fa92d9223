"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides the generic storage capability the services depend on:
find-by-filter, find-by-id, insert, update-by-id, delete-by-id, count
and aggregate-by-group.

Every call runs as its own transaction on its own session drawn from the
session factory, so independent reads (e.g. a page and its count) can run
concurrently. Concurrent writes to the same row are last-write-wins.

Usage:
    class IssueRepository(BaseRepository[Issue]):
        def __init__(self, session_factory) -> None:
            super().__init__(Issue, session_factory)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import Base
from app.utils.query_builder import QueryDescriptor, SortDirection

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository translating QueryDescriptors into SQLAlchemy.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
        session_factory: 비동기 세션 팩토리 (Async session factory)
    """

    def __init__(
        self,
        model: type[ModelType],
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class and session factory.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
            session_factory: 호출마다 세션을 여는 팩토리
                             (Factory used to open one session per call)
        """
        self.model: type[ModelType] = model
        self.session_factory: async_sessionmaker[AsyncSession] = session_factory

    def _where(self, query: Select, descriptor: QueryDescriptor) -> Select:
        """설명자의 필터/검색 절을 쿼리에 적용 — Apply filter and search clauses."""
        for clause in descriptor.filters:
            query = query.where(getattr(self.model, clause.field) == clause.value)

        if descriptor.search is not None:
            matches: list[ColumnElement[bool]] = [
                getattr(self.model, name).icontains(descriptor.search.term, autoescape=True)
                for name in descriptor.search.fields
            ]
            query = query.where(or_(*matches))
        return query

    async def find(self, descriptor: QueryDescriptor) -> Sequence[ModelType]:
        """설명자에 맞는 한 페이지의 레코드를 조회합니다.

        Retrieve one page of records matching the descriptor, sorted by its
        sort key with the primary key as a tie-breaker.

        Args:
            descriptor: 쿼리 설명자 (Query descriptor)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록, 범위를 벗어나면 빈 목록
                                 (Matching records; empty past the last page)
        """
        column = getattr(self.model, descriptor.sort_key)
        ordering = column.asc() if descriptor.sort_direction is SortDirection.ASC else column.desc()

        query: Select = self._where(select(self.model), descriptor)
        query = query.order_by(ordering, self.model.id.asc())
        query = query.offset(descriptor.offset).limit(descriptor.limit)

        async with self.session_factory() as session:
            result = await session.execute(query)
            return result.scalars().all()

    async def count(self, descriptor: QueryDescriptor) -> int:
        """설명자의 필터에 맞는 전체 레코드 수 — Total records matching the filters."""
        query: Select = self._where(select(func.count()).select_from(self.model), descriptor)
        async with self.session_factory() as session:
            return (await session.execute(query)).scalar() or 0

    async def find_by_id(self, record_id: UUID) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        async with self.session_factory() as session:
            return await session.get(self.model, record_id)

    async def insert(self, obj_data: dict[str, Any]) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record and commit it.

        Args:
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        async with self.session_factory() as session:
            async with session.begin():
                db_obj: ModelType = self.model(**obj_data)
                session.add(db_obj)
                await session.flush()
                await session.refresh(db_obj)
            return db_obj

    async def update_by_id(
        self,
        record_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Fetch a record, apply the given field values, and commit.

        Args:
            record_id: 업데이트할 레코드의 UUID (UUID of the record to update)
            update_data: 업데이트할 필드와 값의 딕셔너리
                         (Dictionary of fields and values to update)

        Returns:
            ModelType | None: 업데이트된 레코드 또는 None (Updated record or None)
        """
        async with self.session_factory() as session:
            async with session.begin():
                db_obj: ModelType | None = await session.get(self.model, record_id)
                if db_obj is None:
                    return None

                for field, value in update_data.items():
                    if hasattr(db_obj, field):
                        setattr(db_obj, field, value)

                await session.flush()
                await session.refresh(db_obj)
            return db_obj

    async def delete_by_id(self, record_id: UUID) -> ModelType | None:
        """레코드를 삭제합니다.

        Delete a record by its UUID.

        Args:
            record_id: 삭제할 레코드의 UUID (UUID of the record to delete)

        Returns:
            ModelType | None: 삭제된 레코드 또는 None (Deleted record, None if absent)
        """
        async with self.session_factory() as session:
            async with session.begin():
                db_obj: ModelType | None = await session.get(self.model, record_id)
                if db_obj is None:
                    return None
                await session.delete(db_obj)
            return db_obj

    async def aggregate_by_group(self, column_name: str) -> list[tuple[Any, int]]:
        """컬럼 값별 레코드 수를 집계합니다.

        Group every record by a column and count each group.

        Args:
            column_name: 그룹 기준 컬럼 이름 (Column to group by)

        Returns:
            list[tuple[Any, int]]: (값, 개수) 목록 ((value, count) pairs)
        """
        column = getattr(self.model, column_name)
        query: Select = select(column, func.count()).group_by(column)
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [(value, count) for value, count in result.all()]
