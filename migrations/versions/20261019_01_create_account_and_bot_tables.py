"""create account and bot tables

Revision ID: 3f9c1e7a2b10
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1e7a2b10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255)),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="user"),
        sa.Column("verification", sa.String(length=255)),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("phone", sa.String(length=50)),
        sa.Column("city", sa.String(length=255)),
        sa.Column("country", sa.String(length=255)),
        sa.Column("url_twitter", sa.Text()),
        sa.Column("url_github", sa.Text()),
        sa.Column("login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("block_expires", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_verification", "users", ["verification"])

    op.create_table(
        "user_access",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("ip", sa.Text(), nullable=False),
        sa.Column("browser", sa.Text(), nullable=False),
        sa.Column("country", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_user_access_email", "user_access", ["email"])

    op.create_table(
        "forgot_passwords",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("verification", sa.String(length=255)),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ip_request", sa.Text()),
        sa.Column("browser_request", sa.Text()),
        sa.Column("country_request", sa.Text()),
        sa.Column("ip_changed", sa.Text()),
        sa.Column("browser_changed", sa.Text()),
        sa.Column("country_changed", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_forgot_passwords_email", "forgot_passwords", ["email"])
    op.create_index("ix_forgot_passwords_verification", "forgot_passwords", ["verification"])

    op.create_table(
        "bots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("bots")
    op.drop_index("ix_forgot_passwords_verification", table_name="forgot_passwords")
    op.drop_index("ix_forgot_passwords_email", table_name="forgot_passwords")
    op.drop_table("forgot_passwords")
    op.drop_index("ix_user_access_email", table_name="user_access")
    op.drop_table("user_access")
    op.drop_index("ix_users_verification", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
