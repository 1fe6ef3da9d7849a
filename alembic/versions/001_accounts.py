"""Accounts ledger table.

One row per wallet address holding point counters, task flags, referral
links and the optimistic-concurrency version. Score indexes back the
leaderboard queries.

Revision ID: 001_accounts
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001_accounts"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create accounts and its leaderboard indexes."""
    op.create_table(
        "accounts",
        sa.Column("wallet_address", sa.String(42), primary_key=True),
        sa.Column("invite_code", sa.String(16), nullable=False),
        sa.Column("game_points", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("referral_points", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("social_points", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("high_score", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("daily_games_played", sa.Integer(), server_default="0", nullable=False),
        sa.Column("last_game_date", sa.Date(), nullable=True),
        sa.Column("completed_tasks", _JSON, nullable=False),
        sa.Column("external_identities", _JSON, nullable=False),
        sa.Column("invited_by", sa.String(42), server_default="", nullable=False),
        sa.Column("invited_users", _JSON, nullable=False),
        sa.Column("is_whitelisted", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("airdropped", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.UniqueConstraint("invite_code", name="accounts_invite_code_key"),
        sa.CheckConstraint(
            "game_points >= 0 AND referral_points >= 0 AND social_points >= 0",
            name="ck_accounts_points_non_negative",
        ),
    )
    op.create_index("ix_accounts_invited_by", "accounts", ["invited_by"])
    op.create_index("ix_accounts_game_points", "accounts", [sa.text("game_points DESC")])
    op.create_index("ix_accounts_referral_points", "accounts", [sa.text("referral_points DESC")])
    op.create_index("ix_accounts_social_points", "accounts", [sa.text("social_points DESC")])
    op.create_index("ix_accounts_high_score", "accounts", [sa.text("high_score DESC")])
    op.create_index(
        "ix_accounts_total_points",
        "accounts",
        [sa.text("(game_points + referral_points + social_points) DESC")],
    )


def downgrade() -> None:
    op.drop_index("ix_accounts_total_points", table_name="accounts")
    op.drop_index("ix_accounts_high_score", table_name="accounts")
    op.drop_index("ix_accounts_social_points", table_name="accounts")
    op.drop_index("ix_accounts_referral_points", table_name="accounts")
    op.drop_index("ix_accounts_game_points", table_name="accounts")
    op.drop_index("ix_accounts_invited_by", table_name="accounts")
    op.drop_table("accounts")
