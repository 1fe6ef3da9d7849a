"""Account document and point categories.

One ``Account`` per wallet address. ``total_points`` is always derived from the
three counters and never stored on its own.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class PointCategory(str, Enum):
    """Independently mutable point counters."""

    GAME = "game"
    REFERRAL = "referral"
    SOCIAL = "social"

    @property
    def field_name(self) -> str:
        return f"{self.value}_points"


class Scope(str, Enum):
    """Leaderboard scopes. ``total`` is the derived sum of the three counters."""

    GAME = "game"
    REFERRAL = "referral"
    SOCIAL = "social"
    TOTAL = "total"
    HIGH_SCORE = "high_score"


def normalize_wallet_address(wallet_address: str) -> str:
    """Wallet addresses are keyed case-insensitively, stored lowercase."""
    return (wallet_address or "").strip().lower()


@dataclass
class Account:
    wallet_address: str
    invite_code: str = ""

    game_points: int = 0
    referral_points: int = 0
    social_points: int = 0
    high_score: int = 0

    daily_games_played: int = 0
    last_game_date: date | None = None

    completed_tasks: set[str] = field(default_factory=set)
    external_identities: dict[str, dict[str, Any]] = field(default_factory=dict)

    invited_by: str = ""
    invited_users: list[str] = field(default_factory=list)

    is_whitelisted: bool = False
    airdropped: int = 0

    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0

    @property
    def total_points(self) -> int:
        return self.game_points + self.referral_points + self.social_points

    def points(self, category: PointCategory) -> int:
        return getattr(self, category.field_name)

    def score(self, scope: Scope) -> int:
        """Score used for ranking in the given scope."""
        if scope is Scope.TOTAL:
            return self.total_points
        if scope is Scope.HIGH_SCORE:
            return self.high_score
        return self.points(PointCategory(scope.value))

    def has_completed(self, task_key: str) -> bool:
        return task_key in self.completed_tasks

    def copy(self) -> Account:
        return copy.deepcopy(self)
