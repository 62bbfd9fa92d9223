"""테스트 인프라 — 임시 SQLite DB, 서비스, httpx 클라이언트 픽스처.

Test infrastructure — Temporary SQLite DB, issue service, and httpx client fixtures.
Each test gets its own database file, so no cleanup between tests is needed.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from app.api.deps import get_issue_service
from app.database import Base, create_engine_for, create_session_factory
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.repositories.issue_repository import IssueRepository
from app.services.issue_service import IssueService

ISSUES_URL = "/api/issues"


def issue_payload(**overrides: Any) -> dict[str, Any]:
    """기본 이슈 생성 페이로드 — Default create payload with overrides."""
    payload: dict[str, Any] = {
        "title": "Pothole",
        "description": "Large pothole on 5th",
        "location": "5th & Main",
    }
    payload.update(overrides)
    return payload


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 레포지토리, 서비스, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 SQLite 파일에 스키마를 생성합니다."""
    eng = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'issues.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def repository(engine: AsyncEngine) -> IssueRepository:
    return IssueRepository(create_session_factory(engine))


@pytest.fixture
def service(repository: IssueRepository) -> IssueService:
    return IssueService(repository)


@pytest_asyncio.fixture
async def client(service: IssueService) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — 이슈 서비스를 오버라이드합니다."""
    app.dependency_overrides[get_issue_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def created_issue(client: AsyncClient) -> dict[str, Any]:
    """API로 생성한 기본 이슈."""
    res = await client.post(ISSUES_URL, json=issue_payload())
    assert res.status_code == 201
    return res.json()
