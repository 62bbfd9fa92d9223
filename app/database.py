"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
PostgreSQL (asyncpg) is the production target; any async SQLAlchemy URL
works, which the test suite relies on for SQLite (aiosqlite).
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """주어진 URL로 비동기 엔진을 생성합니다.

    Create an async engine for the given URL.
    Pool sizing and prepared statement settings only apply to asyncpg.

    Args:
        url: 비동기 SQLAlchemy URL (Async SQLAlchemy database URL)
        echo: SQL 로그 출력 여부 (Whether to echo SQL statements)

    Returns:
        AsyncEngine: 생성된 엔진 (The created engine)
    """
    options: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("postgresql+asyncpg"):
        options.update(
            pool_size=5,
            max_overflow=10,
            # Supavisor(트랜잭션 모드 풀러)에서 prepared statement 비활성화
            # Disable prepared statement caches for transaction-mode pooling
            connect_args={"statement_cache_size": 0},
        )
    return create_async_engine(url, **options)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit)
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = create_engine_for(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 — Async session factory shared by repositories
async_session: async_sessionmaker[AsyncSession] = create_session_factory(engine)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass
