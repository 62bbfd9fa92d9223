"""이슈 Pydantic 응답 스키마.

Issue response schemas. Fields are snake_case in Python and camelCase on
the wire (reportedBy, createdAt, totalPages, ...).

Request bodies are not modelled here: create/update payloads go through
app.validators.issue_validator so every field error is reported at once.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssueResponse(CamelModel):
    id: str
    title: str
    description: str
    location: str
    status: str  # Open, In Progress, Resolved
    priority: str  # Low, Medium, High, Critical
    reported_by: str
    completed: bool
    created_at: datetime
    updated_at: datetime


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_issues: int
    has_next: bool
    has_prev: bool


class IssueListResponse(CamelModel):
    issues: list[IssueResponse]
    pagination: PaginationMeta


class DeletedIssue(CamelModel):
    id: str
    title: str


class DeleteResponse(CamelModel):
    message: str
    deleted_issue: DeletedIssue


class StatusCount(CamelModel):
    status: str
    count: int


class StatsResponse(CamelModel):
    total: int
    status_breakdown: list[StatusCount]
