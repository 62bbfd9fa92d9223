"""이슈 서비스.

Issue service — Business logic for issue CRUD, listing and statistics.
Orchestrates the validator, query builder, aggregator and repository.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Mapping, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from app.enums import IssueStatus
from app.models.issue import Issue
from app.repositories.issue_repository import IssueRepository, issue_repository
from app.services.aggregator import Aggregator
from app.utils.exceptions import InvalidIdError, NotFoundError, ServerError, ValidationError
from app.utils.query_builder import build_pagination, build_query
from app.validators.issue_validator import ValidationFailure, validate_create, validate_update

T = TypeVar("T")


def apply_completion_rule(values: dict[str, Any]) -> dict[str, Any]:
    """Resolved로 바뀌면 completed를 True로 강제합니다.

    Force `completed` to True when the written status is Resolved.
    Leaving Resolved never clears `completed`.
    """
    if values.get("status") == IssueStatus.RESOLVED.value:
        return {**values, "completed": True}
    return values


async def gather_or_cancel(*operations: Awaitable[Any]) -> list[Any]:
    """모두 완료되거나, 하나가 실패하면 나머지를 취소합니다.

    Await the operations concurrently. When one fails the others are
    cancelled and awaited before the failure propagates.
    """
    tasks = [asyncio.ensure_future(operation) for operation in operations]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class IssueService:

    def __init__(self, repository: IssueRepository) -> None:
        self.repository: IssueRepository = repository
        self.aggregator: Aggregator = Aggregator(repository)

    def build_response(self, issue: Issue) -> dict[str, Any]:
        return {
            "id": str(issue.id),
            "title": issue.title,
            "description": issue.description,
            "location": issue.location,
            "status": issue.status,
            "priority": issue.priority,
            "reported_by": issue.reported_by,
            "completed": issue.completed,
            "created_at": _as_utc(issue.created_at),
            "updated_at": _as_utc(issue.updated_at),
        }

    @staticmethod
    def parse_id(raw_id: str) -> UUID:
        try:
            return UUID(str(raw_id))
        except ValueError:
            raise InvalidIdError(f"Invalid issue ID: {raw_id}")

    async def _call(self, operation: Awaitable[T]) -> T:
        # 저장소 오류는 ServerError로 노출 (Repository failures surface as ServerError)
        try:
            return await operation
        except SQLAlchemyError as exc:
            raise ServerError(f"Repository failure: {exc}") from exc

    async def create_issue(self, payload: Any) -> Issue:
        result = validate_create(payload)
        if isinstance(result, ValidationFailure):
            raise ValidationError(result.to_list())

        values: dict[str, Any] = {
            "title": result.title,
            "description": result.description,
            "location": result.location,
            "status": result.status.value,
            "priority": result.priority.value,
            "reported_by": result.reported_by,
            "completed": False,
        }
        now = datetime.now(timezone.utc)
        values["created_at"] = values["updated_at"] = now
        return await self._call(self.repository.insert(apply_completion_rule(values)))

    async def get_issue(self, issue_id: str) -> Issue:
        issue = await self._call(self.repository.find_by_id(self.parse_id(issue_id)))
        if issue is None:
            raise NotFoundError()
        return issue

    async def list_issues(self, params: Mapping[str, Any]) -> dict[str, Any]:
        descriptor = build_query(params)
        # 페이지와 전체 개수를 동시에 조회 (Page and count run concurrently)
        issues, total = await self._call(
            gather_or_cancel(
                self.repository.find(descriptor),
                self.repository.count(descriptor),
            )
        )
        return {
            "issues": [self.build_response(issue) for issue in issues],
            "pagination": build_pagination(descriptor, total),
        }

    async def update_issue(self, issue_id: str, payload: Any) -> Issue:
        record_id = self.parse_id(issue_id)
        result = validate_update(payload)
        if isinstance(result, ValidationFailure):
            raise ValidationError(result.to_list())

        changes: dict[str, Any] = {
            **apply_completion_rule(result.changes),
            "updated_at": datetime.now(timezone.utc),
        }

        updated = await self._call(self.repository.update_by_id(record_id, changes))
        if updated is None:
            raise NotFoundError()
        return updated

    async def delete_issue(self, issue_id: str) -> dict[str, str]:
        deleted = await self._call(self.repository.delete_by_id(self.parse_id(issue_id)))
        if deleted is None:
            raise NotFoundError()
        # 삭제 확인용 영수증 (Receipt shown to the client for confirmation)
        return {"id": str(deleted.id), "title": deleted.title}

    async def get_stats(self) -> dict[str, Any]:
        return await self._call(self.aggregator.summarize())


issue_service: IssueService = IssueService(issue_repository)
