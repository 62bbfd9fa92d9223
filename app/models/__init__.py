"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
schema creation in tests.

Modules:
    issue: 이슈 및 상태/우선순위 열거형 (Issue, IssueStatus, IssuePriority)
"""

from app.enums import IssuePriority, IssueStatus
from app.models.issue import Issue

__all__ = ["Issue", "IssuePriority", "IssueStatus"]
