"""create_issues

Revision ID: a1c2e3f4b5d6
Revises:
Create Date: 2026-10-19 10:00:00.000000

이슈(issues) 테이블 생성.
커뮤니티 이슈 보고 및 상태 추적 (Open -> In Progress -> Resolved).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "a1c2e3f4b5d6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issues",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(500), nullable=False),
        sa.Column("status", sa.String(20), server_default="Open", nullable=False),
        sa.Column("priority", sa.String(20), server_default="Medium", nullable=False),
        sa.Column("reported_by", sa.String(100), server_default="Anonymous", nullable=False),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_issues_status", "issues", ["status"])
    op.create_index("ix_issues_priority", "issues", ["priority"])
    op.create_index("ix_issues_created_at", "issues", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_issues_created_at")
    op.drop_index("ix_issues_priority")
    op.drop_index("ix_issues_status")
    op.drop_table("issues")
