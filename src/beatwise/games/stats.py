"""Per-account game counters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from beatwise.accounts.models import Account
from beatwise.games.quota import MAX_GAMES_PER_DAY, can_play, game_day, games_played_today


@dataclass(frozen=True)
class GameStats:
    wallet_address: str
    game_points: int
    high_score: int
    total_points: int
    games_played_today: int
    games_remaining: int
    can_play: bool


def game_stats(account: Account, now: datetime | None = None) -> GameStats:
    played = games_played_today(account, game_day(now))
    return GameStats(
        wallet_address=account.wallet_address,
        game_points=account.game_points,
        high_score=account.high_score,
        total_points=account.total_points,
        games_played_today=played,
        games_remaining=max(0, MAX_GAMES_PER_DAY - played),
        can_play=can_play(account, now),
    )
