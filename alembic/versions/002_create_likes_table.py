"""Create likes table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-12

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the likes edge table."""
    op.create_table(
        "likes",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("from_user_id", sa.UUID(), nullable=False),
        sa.Column("to_user_id", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_likes")),
        sa.ForeignKeyConstraint(
            ["from_user_id"],
            ["users.id"],
            name=op.f("fk_likes_from_user_id_users"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["to_user_id"],
            ["users.id"],
            name=op.f("fk_likes_to_user_id_users"),
            ondelete="CASCADE",
        ),
        # Final arbiter for concurrent likes of the same pair
        sa.UniqueConstraint(
            "from_user_id",
            "to_user_id",
            name="uq_likes_from_user_id_to_user_id",
        ),
    )
    op.create_index(
        "ix_likes_from_user_id_created_at",
        "likes",
        ["from_user_id", "created_at"],
    )
    op.create_index(
        "ix_likes_to_user_id_created_at",
        "likes",
        ["to_user_id", "created_at"],
    )


def downgrade() -> None:
    """Drop the likes table."""
    op.drop_index("ix_likes_to_user_id_created_at", table_name="likes")
    op.drop_index("ix_likes_from_user_id_created_at", table_name="likes")
    op.drop_table("likes")
