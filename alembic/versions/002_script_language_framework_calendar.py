"""script language, framework and calendar days

Revision ID: 002
Revises: 001
Create Date: 2026-02-03

Adds the language/framework form fields and calendarDays for multi-day
content calendars (0 = single script).
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("scripts", sa.Column("language", sa.String(50), nullable=True))
    op.add_column("scripts", sa.Column("framework", sa.String(20), nullable=True))
    op.add_column(
        "scripts",
        sa.Column("calendarDays", sa.Integer(), nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_column("scripts", "calendarDays")
    op.drop_column("scripts", "framework")
    op.drop_column("scripts", "language")
