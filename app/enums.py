"""공용 열거형 및 필드 제약 상수.

Shared enumerations and field constraints.
Used by the server (model, validator, aggregator) and the API client alike,
so this module must not import anything database related.
"""

from enum import Enum

# 필드 길이 제한 — Field length limits
TITLE_MAX_LENGTH: int = 200
DESCRIPTION_MAX_LENGTH: int = 2000
LOCATION_MAX_LENGTH: int = 500
REPORTED_BY_MAX_LENGTH: int = 100

DEFAULT_REPORTER: str = "Anonymous"


class IssueStatus(str, Enum):
    """이슈 진행 상태.

    Issue lifecycle status. Declaration order is the canonical order.
    """

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"

    def next(self) -> "IssueStatus":
        """정방향 순환의 다음 상태 — Open -> In Progress -> Resolved -> Open."""
        members: list[IssueStatus] = list(IssueStatus)
        return members[(members.index(self) + 1) % len(members)]


class IssuePriority(str, Enum):
    """이슈 우선순위 — Issue priority."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"
