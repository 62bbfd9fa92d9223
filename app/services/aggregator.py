"""이슈 통계 집계 서비스.

Issue statistics aggregator — Counts issues per status over the full record set.
Recomputed from storage on every call; nothing is maintained incrementally.
"""

from typing import Any

from app.enums import IssueStatus
from app.repositories.issue_repository import IssueRepository

_CANONICAL_ORDER: dict[str, int] = {status.value: index for index, status in enumerate(IssueStatus)}


def _breakdown_order(item: tuple[str, int]) -> tuple[int, str]:
    # 알 수 없는 상태는 이름순으로 마지막 (Unknown statuses sort last, by name)
    status = item[0]
    return _CANONICAL_ORDER.get(status, len(_CANONICAL_ORDER)), status


class Aggregator:
    """상태별 이슈 수 집계기.

    Only statuses present in the data appear in the breakdown; the breakdown
    follows the canonical status order so the result is deterministic.
    """

    def __init__(self, repository: IssueRepository) -> None:
        self.repository: IssueRepository = repository

    async def summarize(self) -> dict[str, Any]:
        """상태별 집계 — {total, statusBreakdown: [{status, count}, ...]}."""
        groups: list[tuple[str, int]] = await self.repository.count_by_status()
        groups.sort(key=_breakdown_order)
        return {
            "total": sum(count for _, count in groups),
            "statusBreakdown": [{"status": status, "count": count} for status, count in groups],
        }
