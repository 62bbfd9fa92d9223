"""이슈 레포지토리.

Issue repository — Handles issues DB queries.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import async_session
from app.models.issue import Issue
from app.repositories.base import BaseRepository


class IssueRepository(BaseRepository[Issue]):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        super().__init__(Issue, session_factory)

    async def count_by_status(self) -> list[tuple[str, int]]:
        return await self.aggregate_by_group("status")


issue_repository: IssueRepository = IssueRepository(async_session)
