"""Axiom 로깅 미들웨어 테스트.

Axiom logging middleware tests — Event fields, reporter masking, error
reasons, skipped paths, and ingest failures that must not break requests.
The Axiom client is replaced with an in-memory fake.
"""

from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.middleware import axiom_logging
from app.middleware.axiom_logging import AxiomLoggingMiddleware, _error_reason, _mask
from app.utils.exceptions import NotFoundError


class FakeAxiomClient:
    instances: list["FakeAxiomClient"] = []

    def __init__(self, token: str) -> None:
        self.token = token
        self.events: list[tuple[str, dict[str, Any]]] = []
        self.fail = False
        FakeAxiomClient.instances.append(self)

    def ingest_events(self, dataset: str, events: list[dict[str, Any]]) -> None:
        if self.fail:
            raise RuntimeError("axiom unavailable")
        self.events.extend((dataset, event) for event in events)


def _build_app() -> FastAPI:
    test_app = FastAPI()
    test_app.add_middleware(AxiomLoggingMiddleware)

    @test_app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @test_app.post("/api/issues")
    async def create(payload: dict) -> dict:
        return payload

    @test_app.get("/api/issues/{issue_id}")
    async def fetch(issue_id: str) -> dict:
        if issue_id == "missing":
            raise NotFoundError()
        return {"id": issue_id}

    return test_app


@pytest.fixture
def axiom(monkeypatch) -> None:
    FakeAxiomClient.instances.clear()
    monkeypatch.setattr(settings, "AXIOM_API_TOKEN", "xaat-test")
    monkeypatch.setattr(settings, "AXIOM_DATASET", "issue-api")
    monkeypatch.setattr(axiom_logging, "AxiomClient", FakeAxiomClient)


@pytest_asyncio.fixture
async def logged_client(axiom):
    async with AsyncClient(transport=ASGITransport(app=_build_app()), base_url="http://test") as ac:
        yield ac


def _events() -> list[dict[str, Any]]:
    return [event for _, event in FakeAxiomClient.instances[0].events]


class TestAxiomLoggingMiddleware:

    async def test_success_event(self, logged_client: AsyncClient):
        res = await logged_client.get("/api/issues/abc", params={"x": "1"})
        assert res.status_code == 200

        (event,) = _events()
        assert event["method"] == "GET"
        assert event["path"] == "/api/issues/abc"
        assert event["issue_id"] == "abc"
        assert event["query_params"] == {"x": "1"}
        assert event["status_code"] == 200
        assert event["duration_ms"] >= 0
        assert "error" not in event
        assert FakeAxiomClient.instances[0].events[0][0] == "issue-api"

    async def test_reporter_masked(self, logged_client: AsyncClient):
        res = await logged_client.post("/api/issues", json={"title": "Pothole", "reportedBy": "Dana"})
        # 응답 본문은 마스킹되지 않음 (Only the logged copy is masked)
        assert res.json()["reportedBy"] == "Dana"

        (event,) = _events()
        assert "Dana" not in event["request_body"]
        assert "issue_id" not in event

    async def test_error_reason_recorded(self, logged_client: AsyncClient):
        res = await logged_client.get("/api/issues/missing")
        assert res.status_code == 404
        assert res.json() == {"detail": "Issue not found"}

        (event,) = _events()
        assert event["status_code"] == 404
        assert event["error"] == "Issue not found"

    async def test_skipped_paths(self, logged_client: AsyncClient):
        await logged_client.get("/health")
        assert _events() == []

    async def test_ingest_failure_does_not_break_request(self, logged_client: AsyncClient):
        await logged_client.get("/health")
        FakeAxiomClient.instances[0].fail = True
        res = await logged_client.get("/api/issues/abc")
        assert res.status_code == 200


async def test_passthrough_without_configuration(monkeypatch):
    FakeAxiomClient.instances.clear()
    monkeypatch.setattr(settings, "AXIOM_API_TOKEN", "")
    monkeypatch.setattr(axiom_logging, "AxiomClient", FakeAxiomClient)
    async with AsyncClient(transport=ASGITransport(app=_build_app()), base_url="http://test") as ac:
        res = await ac.get("/api/issues/abc")
    assert res.status_code == 200
    assert FakeAxiomClient.instances == []


class TestHelpers:

    def test_mask_top_level_only(self):
        assert _mask({"reportedBy": "Dana", "title": "t"}) == {"reportedBy": "***", "title": "t"}
        assert _mask(["reportedBy"]) == ["reportedBy"]

    def test_error_reason_includes_field_errors(self):
        reason = _error_reason(b'{"detail": "Validation failed", "errors": [{"field": "title"}]}')
        assert "Validation failed" in reason
        assert '"field": "title"' in reason

    def test_error_reason_plain_text(self):
        assert _error_reason(b"Bad Gateway") == "Bad Gateway"
