"""낙관적 변경 재조정 테스트.

Reconciliation tests — Optimistic delete/update visibility, server-wins
commits, refetch-on-failure, and stale marking when the refetch fails.
The API is a fake whose write calls can be held open with asyncio.Event.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from app.client import IssueApiClient, IssueCollection, InvalidResponse, NotFound, ServerFailure
from app.client.errors import NetworkError
from app.client.reconciliation import merge_issue, replace_issue, without_issue


def _issue(issue_id: str, **fields: Any) -> dict[str, Any]:
    return {"id": issue_id, "title": f"Issue {issue_id}", "status": "Open", "completed": False, **fields}


class FakeApi:
    """서버 역할을 하는 가짜 API — In-memory stand-in for IssueApiClient."""

    def __init__(self, issues: list[dict[str, Any]]) -> None:
        self.server: list[dict[str, Any]] = [dict(issue) for issue in issues]
        self.list_calls: list[dict[str, Any]] = []
        self.gate: asyncio.Event | None = None
        self.write_error: Exception | None = None
        self.list_error: Exception | None = None

    async def list_issues(self, *, bypass_cache: bool = False, **params: Any) -> dict[str, Any]:
        self.list_calls.append({"bypass_cache": bypass_cache, **params})
        if self.list_error is not None:
            raise self.list_error
        return {"issues": [dict(issue) for issue in self.server], "pagination": {"totalIssues": len(self.server)}}

    async def _hold(self) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.write_error is not None:
            raise self.write_error

    async def create_issue(self, payload: dict[str, Any]) -> dict[str, Any]:
        await self._hold()
        record = _issue(f"n{len(self.server)}", **payload)
        self.server.append(record)
        return record

    async def update_issue(self, issue_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        await self._hold()
        for issue in self.server:
            if issue["id"] == issue_id:
                issue.update(changes)
                if changes.get("status") == "Resolved":
                    issue["completed"] = True
                issue["updatedAt"] = "server-time"
                return dict(issue)
        raise NotFound("Resource not found", 404)

    async def delete_issue(self, issue_id: str) -> dict[str, Any]:
        await self._hold()
        for issue in self.server:
            if issue["id"] == issue_id:
                self.server.remove(issue)
                return {"message": "Issue deleted successfully", "deletedIssue": {"id": issue_id}}
        raise NotFound("Resource not found", 404)


@pytest.fixture
def api() -> FakeApi:
    return FakeApi([_issue("a"), _issue("b"), _issue("c")])


@pytest_asyncio.fixture
async def collection(api: FakeApi) -> IssueCollection:
    coll = IssueCollection(api, page=1, limit=10)
    await coll.refresh()
    api.list_calls.clear()
    return coll


def _ids(collection: IssueCollection) -> list[str]:
    return [issue["id"] for issue in collection.issues]


class TestTransitions:

    def test_without_issue(self):
        issues = [_issue("a"), _issue("b")]
        assert without_issue(issues, "a") == [_issue("b")]
        assert without_issue(issues, "zzz") == issues

    def test_merge_issue_leaves_input_untouched(self):
        issues = [_issue("a")]
        merged = merge_issue(issues, "a", {"status": "Resolved"})
        assert merged[0]["status"] == "Resolved"
        assert issues[0]["status"] == "Open"

    def test_replace_issue_server_wins(self):
        issues = [_issue("a", title="local")]
        replaced = replace_issue(issues, {"id": "a", "title": "server"})
        assert replaced == [{"id": "a", "title": "server"}]


class TestOptimisticDelete:

    async def test_removed_before_server_answers(self, api: FakeApi, collection: IssueCollection):
        api.gate = asyncio.Event()
        task = asyncio.create_task(collection.delete("b"))
        await asyncio.sleep(0)
        assert _ids(collection) == ["a", "c"]

        api.gate.set()
        receipt = await task
        assert receipt["deletedIssue"]["id"] == "b"
        assert _ids(collection) == ["a", "c"]
        assert api.list_calls == []

    async def test_failure_refetches_instead_of_restoring(self, api: FakeApi, collection: IssueCollection):
        api.write_error = ServerFailure("Server error. Please try again later.", 500)
        # 서버 측에서 다른 변경이 일어났음 (Someone else changed the server meanwhile)
        api.server.append(_issue("d"))

        with pytest.raises(ServerFailure):
            await collection.delete("b")

        assert _ids(collection) == ["a", "b", "c", "d"]
        assert api.list_calls == [{"bypass_cache": True, "page": 1, "limit": 10}]
        assert collection.state.stale is False

    async def test_concurrent_deletes_of_different_issues(self, api: FakeApi, collection: IssueCollection):
        await asyncio.gather(collection.delete("a"), collection.delete("c"))
        assert _ids(collection) == ["b"]


class TestOptimisticUpdate:

    async def test_merged_before_server_answers(self, api: FakeApi, collection: IssueCollection):
        api.gate = asyncio.Event()
        task = asyncio.create_task(collection.update("a", {"title": "Renamed"}))
        await asyncio.sleep(0)
        assert collection.find("a")["title"] == "Renamed"
        assert "updatedAt" not in collection.find("a")

        api.gate.set()
        await task
        assert collection.find("a")["updatedAt"] == "server-time"

    async def test_server_record_wins(self, collection: IssueCollection):
        record = await collection.update("a", {"status": "Resolved"})
        assert record["completed"] is True
        assert collection.find("a") == record

    async def test_failure_refetches(self, api: FakeApi, collection: IssueCollection):
        api.write_error = NetworkError()
        with pytest.raises(NetworkError):
            await collection.update("a", {"title": "Never saved"})
        assert collection.find("a")["title"] == "Issue a"
        assert api.list_calls[-1]["bypass_cache"] is True

    async def test_missing_issue_refetches(self, api: FakeApi, collection: IssueCollection):
        api.server = [issue for issue in api.server if issue["id"] != "b"]
        with pytest.raises(NotFound):
            await collection.update("b", {"title": "Gone"})
        assert _ids(collection) == ["a", "c"]


class TestCreateAndCycle:

    async def test_create_refetches_after_confirmation(self, api: FakeApi, collection: IssueCollection):
        created = await collection.create({"title": "New"})
        assert created["id"] in _ids(collection)
        assert api.list_calls == [{"bypass_cache": True, "page": 1, "limit": 10}]

    async def test_create_failure_leaves_state(self, api: FakeApi, collection: IssueCollection):
        api.write_error = ServerFailure("Server error. Please try again later.", 500)
        with pytest.raises(ServerFailure):
            await collection.create({"title": "New"})
        assert _ids(collection) == ["a", "b", "c"]

    async def test_cycle_status_forward(self, collection: IssueCollection):
        assert (await collection.cycle_status("a"))["status"] == "In Progress"
        assert (await collection.cycle_status("a"))["status"] == "Resolved"
        record = await collection.cycle_status("a")
        assert record["status"] == "Open"
        assert record["completed"] is True

    async def test_cycle_unknown_issue(self, api: FakeApi, collection: IssueCollection):
        with pytest.raises(NotFound):
            await collection.cycle_status("zzz")
        assert _ids(collection) == ["a", "b", "c"]
        assert api.list_calls == []


class TestStaleState:

    async def test_resync_failure_marks_stale(self, api: FakeApi, collection: IssueCollection):
        api.write_error = ServerFailure("Server error. Please try again later.", 500)
        api.list_error = NetworkError()

        with pytest.raises(ServerFailure):
            await collection.delete("a")

        assert collection.state.stale is True
        assert isinstance(collection.state.error, NetworkError)
        # 낙관적 상태가 그대로 남음 (Optimistic state is left as-is)
        assert _ids(collection) == ["b", "c"]

    async def test_successful_refresh_clears_stale(self, api: FakeApi, collection: IssueCollection):
        collection.state.stale = True
        await collection.refresh()
        assert collection.state.stale is False
        assert collection.state.pagination == {"totalIssues": 3}


# ---------------------------------------------------------------------------
# 실제 클라이언트 — Through IssueApiClient with a mocked network
# ---------------------------------------------------------------------------
class TestUnusableServerResponses:
    """성공 상태지만 본문을 쓸 수 없는 쓰기 응답."""

    @staticmethod
    def _server(write: httpx.Response) -> Callable[[httpx.Request], httpx.Response]:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"issues": [_issue("a", title="Old")], "pagination": {}})
            return write

        return handler

    async def _collection(self, handler: Callable[[httpx.Request], httpx.Response]) -> IssueCollection:
        api = IssueApiClient("http://api.test/api/issues", retry_delay=0, transport=httpx.MockTransport(handler))
        coll = IssueCollection(api)
        await coll.refresh()
        return coll

    async def test_html_body_on_update_resyncs(self):
        html = httpx.Response(200, text="<html>proxy page</html>", headers={"content-type": "text/html"})
        coll = await self._collection(self._server(html))
        try:
            with pytest.raises(InvalidResponse):
                await coll.update("a", {"title": "New"})
            assert coll.find("a")["title"] == "Old"
            assert coll.state.stale is False
        finally:
            await coll.api.aclose()

    async def test_html_body_on_delete_resyncs(self):
        html = httpx.Response(200, text="<html>proxy page</html>", headers={"content-type": "text/html"})
        coll = await self._collection(self._server(html))
        try:
            with pytest.raises(InvalidResponse):
                await coll.delete("a")
            assert _ids(coll) == ["a"]
        finally:
            await coll.api.aclose()
