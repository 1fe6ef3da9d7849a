"""ORM models.

The whole ledger lives in one ``accounts`` table: one row per wallet address,
updated with a version check so concurrent writers cannot lose updates.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from beatwise.db.base import Base

_JSON = JSON().with_variant(JSONB(), "postgresql")


class AccountRow(Base):
    """Maps to the 'accounts' table."""

    __tablename__ = "accounts"

    wallet_address: Mapped[str] = mapped_column(String(42), primary_key=True)
    invite_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)

    # --- Points ---
    game_points: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    referral_points: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    social_points: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    high_score: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")

    # --- Daily quota ---
    daily_games_played: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    last_game_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # --- Quests / identities ---
    completed_tasks: Mapped[list[str]] = mapped_column(_JSON, nullable=False, default=list)
    external_identities: Mapped[dict[str, Any]] = mapped_column(_JSON, nullable=False, default=dict)

    # --- Referrals ---
    invited_by: Mapped[str] = mapped_column(String(42), nullable=False, default="", server_default="", index=True)
    invited_users: Mapped[list[str]] = mapped_column(_JSON, nullable=False, default=list)

    # --- Admin ---
    is_whitelisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("false"))
    airdropped: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
