"""Create users table.

Revision ID: 001
Revises:
Create Date: 2026-10-12

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the users table."""
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column(
            "github_id",
            sa.String(255),
            nullable=True,
            comment="User ID from GitHub OAuth",
        ),
        sa.Column(
            "google_id",
            sa.String(255),
            nullable=True,
            comment="User ID from Google OAuth",
        ),
        sa.Column("skill_set", sa.Text(), nullable=True),
        sa.Column("github_url", sa.Text(), nullable=True),
        sa.Column("linkedin_url", sa.Text(), nullable=True),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("mbti", sa.String(10), nullable=True),
        sa.Column("collaboration_goal", sa.Text(), nullable=True),
        sa.Column(
            "liked_count",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="Likes this user gave (denormalized from likes)",
        ),
        sa.Column(
            "liked_by_count",
            sa.Integer(),
            server_default="0",
            nullable=False,
            comment="Likes this user received (denormalized from likes)",
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
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_users")),
        sa.UniqueConstraint("github_id", name=op.f("uq_users_github_id")),
        sa.UniqueConstraint("google_id", name=op.f("uq_users_google_id")),
        sa.CheckConstraint("liked_count >= 0", name=op.f("ck_users_liked_count_non_negative")),
        sa.CheckConstraint(
            "liked_by_count >= 0",
            name=op.f("ck_users_liked_by_count_non_negative"),
        ),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)


def downgrade() -> None:
    """Drop the users table."""
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
