"""이슈 관련 SQLAlchemy ORM 모델 정의.

Issue SQLAlchemy ORM model definition.
An issue is a community-reported problem tracked through
Open -> In Progress -> Resolved.

Tables:
    - issues: 커뮤니티 이슈 (Community-reported issues)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.enums import (
    DEFAULT_REPORTER,
    LOCATION_MAX_LENGTH,
    REPORTED_BY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    IssuePriority,
    IssueStatus,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Issue(Base):
    """이슈 모델 — 커뮤니티가 보고한 문제.

    Issue model — A community-reported problem with a lifecycle status.
    `completed` is derived from `status` by the issue service at write time
    and is never written from client input.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier, assigned once)
        title: 제목 (Title, max 200 chars)
        description: 상세 설명 (Description, max 2000 chars)
        location: 위치 (Location, max 500 chars)
        status: 진행 상태 (IssueStatus value, default "Open")
        priority: 우선순위 (IssuePriority value, default "Medium")
        reported_by: 보고자 이름 (Reporter display name, default "Anonymous")
        completed: 완료 여부 (True once the issue has been resolved)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last mutation timestamp)
    """

    __tablename__ = "issues"
    __table_args__ = (
        Index("ix_issues_status", "status"),
        Index("ix_issues_priority", "priority"),
        Index("ix_issues_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(LOCATION_MAX_LENGTH), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=IssueStatus.OPEN.value, nullable=False)
    priority: Mapped[str] = mapped_column(String(20), default=IssuePriority.MEDIUM.value, nullable=False)
    reported_by: Mapped[str] = mapped_column(String(REPORTED_BY_MAX_LENGTH), default=DEFAULT_REPORTER, nullable=False)
    # 파생 필드 — status가 Resolved가 되면 True (Derived, forced True on Resolved)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
    # 수정 일시 — 서비스가 매 변경마다 갱신 (Stamped by the service on every mutation)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
