"""낙관적 변경 및 서버 재동기화 엔진.

Reconciliation engine — Keeps a client-held issue collection consistent with
the server across optimistic mutations.

Every write is a two-phase protocol:
    1. apply the tentative change to local state (visible immediately,
       before the network call resolves)
    2. settle the network call, then either commit the server's
       authoritative record or resynchronize by refetching the collection

Local state only changes through the pure transition functions below.
A failed write is never rolled back by re-inserting the old copy; the
collection is always replaced by a fresh authoritative read.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Generic, TypeVar

from app.client.errors import ApiError, NotFound
from app.client.transport import IssueApiClient
from app.enums import IssueStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


# --- 상태 전이 함수 (State transitions) ---

def without_issue(issues: list[dict[str, Any]], issue_id: str) -> list[dict[str, Any]]:
    return [issue for issue in issues if issue.get("id") != issue_id]


def merge_issue(issues: list[dict[str, Any]], issue_id: str, changes: dict[str, Any]) -> list[dict[str, Any]]:
    return [{**issue, **changes} if issue.get("id") == issue_id else issue for issue in issues]


def replace_issue(issues: list[dict[str, Any]], record: dict[str, Any]) -> list[dict[str, Any]]:
    # 서버 필드가 항상 우선 (Server fields always win)
    return [dict(record) if issue.get("id") == record.get("id") else issue for issue in issues]


@dataclass
class CollectionState:
    """클라이언트가 보유한 이슈 컬렉션 상태.

    Attributes:
        issues: 현재 보이는 이슈 목록 (Issues currently shown)
        pagination: 마지막 목록 응답의 메타데이터 (Metadata of the last list read)
        stale: 재동기화 실패 여부 (True when a resync failed; state may be out of date)
        error: 마지막 재동기화 오류 (The error that left the state stale)
    """

    issues: list[dict[str, Any]] = field(default_factory=list)
    pagination: dict[str, Any] | None = None
    stale: bool = False
    error: ApiError | None = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """네트워크 호출 결과 — Either the server's value or the failure."""

    value: T | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle(call: Awaitable[T]) -> Outcome[T]:
    try:
        return Outcome(value=await call)
    except ApiError as exc:
        return Outcome(error=exc)


class IssueCollection:
    """낙관적 변경을 지원하는 이슈 컬렉션.

    One collection per logical list view; only one reconciliation per
    collection is expected in flight. Operations on different issues are
    independent and may settle in any order.

    Attributes:
        api: 이슈 API 클라이언트 (API client)
        params: 목록 조회 파라미터 (List parameters used on every refetch)
        state: 현재 컬렉션 상태 (Current collection state)
    """

    def __init__(self, api: IssueApiClient, **params: Any) -> None:
        self.api: IssueApiClient = api
        self.params: dict[str, Any] = params
        self.state: CollectionState = CollectionState()

    @property
    def issues(self) -> list[dict[str, Any]]:
        return self.state.issues

    def find(self, issue_id: str) -> dict[str, Any] | None:
        return next((issue for issue in self.state.issues if issue.get("id") == issue_id), None)

    async def refresh(self, *, bypass_cache: bool = False) -> CollectionState:
        """목록을 다시 읽어 상태를 교체합니다 — Replace state with a fresh list read."""
        page = await self.api.list_issues(bypass_cache=bypass_cache, **self.params)
        self.state = CollectionState(issues=list(page["issues"]), pagination=page.get("pagination"))
        return self.state

    async def _resync(self) -> None:
        try:
            await self.refresh(bypass_cache=True)
        except ApiError as exc:
            logger.warning("Resync failed, collection is stale: %s", exc.message)
            self.state.stale = True
            self.state.error = exc

    async def _finish(self, outcome: Outcome[T]) -> T:
        if not outcome.ok:
            await self._resync()
            raise outcome.error
        return outcome.value

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """생성 — 낙관적이지 않음, 서버 확인 후 재조회.

        Not optimistic: waits for the server, then refetches bypassing the
        cache so server-computed fields appear.
        """
        created = await self.api.create_issue(payload)
        await self.refresh(bypass_cache=True)
        return created

    async def delete(self, issue_id: str) -> dict[str, Any]:
        """낙관적 삭제 — Remove locally, then confirm with the server."""
        self.state.issues = without_issue(self.state.issues, issue_id)
        return await self._finish(await settle(self.api.delete_issue(issue_id)))

    async def update(self, issue_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """낙관적 수정 — Merge locally, then commit the server's record."""
        self.state.issues = merge_issue(self.state.issues, issue_id, changes)
        record = await self._finish(await settle(self.api.update_issue(issue_id, changes)))
        self.state.issues = replace_issue(self.state.issues, record)
        return record

    async def cycle_status(self, issue_id: str) -> dict[str, Any]:
        """상태를 정방향으로 한 단계 진행 — Open -> In Progress -> Resolved -> Open."""
        issue = self.find(issue_id)
        if issue is None:
            raise NotFound(f"Issue {issue_id} is not in this collection")
        next_status = IssueStatus(issue["status"]).next()
        return await self.update(issue_id, {"status": next_status.value})
