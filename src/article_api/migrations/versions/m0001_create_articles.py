"""create_articles

Revision ID: 1
Create Date: 2026-10-19

Create the articles table.
"""

import sqlalchemy as sa
from alembic.operations import Operations

revision: int = 1
description: str = "Create articles table"


def upgrade(op: Operations) -> None:
    """Create the articles table."""
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sqlite_autoincrement=True,
    )


def downgrade(op: Operations) -> None:
    """Drop the articles table."""
    op.drop_table("articles")
