"""Create workplaces table.

Revision ID: 003
Revises: 002
Create Date: 2026-10-12

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the workplaces table."""
    op.create_table(
        "workplaces",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column(
            "notes",
            postgresql.JSON(),
            server_default=sa.text("'[]'::json"),
            nullable=False,
            comment="Chronological [{date, content}] entries, appended only",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_workplaces")),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name=op.f("fk_workplaces_user_id_users"),
            ondelete="CASCADE",
        ),
    )
    op.create_index(op.f("ix_workplaces_user_id"), "workplaces", ["user_id"])
    # Bounding-box lookups filter on latitude first
    op.create_index(op.f("ix_workplaces_latitude"), "workplaces", ["latitude"])


def downgrade() -> None:
    """Drop the workplaces table."""
    op.drop_index(op.f("ix_workplaces_latitude"), table_name="workplaces")
    op.drop_index(op.f("ix_workplaces_user_id"), table_name="workplaces")
    op.drop_table("workplaces")
