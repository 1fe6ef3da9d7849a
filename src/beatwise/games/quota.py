"""Daily game quota.

Each account may register ``MAX_GAMES_PER_DAY`` plays per UTC calendar day.
The day rollover is evaluated lazily: reads compute the effective count
without writing, and the reset is persisted together with the next recorded
play.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone

import structlog

from beatwise.accounts.models import Account
from beatwise.accounts.store import AccountStore
from beatwise.ledger.errors import QuotaExceeded
from beatwise.ledger.mutation import DEFAULT_ATTEMPTS, apply_to_account

logger = structlog.get_logger()

MAX_GAMES_PER_DAY = 5


def game_day(now: datetime | None = None) -> date:
    """Current quota day (UTC)."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date() if now.tzinfo else now.date()


def games_played_today(account: Account, today: date) -> int:
    if account.last_game_date is None or account.last_game_date < today:
        return 0
    return account.daily_games_played


def games_remaining(account: Account, now: datetime | None = None) -> int:
    return max(0, MAX_GAMES_PER_DAY - games_played_today(account, game_day(now)))


def can_play(account: Account, now: datetime | None = None) -> bool:
    """Read-only quota check; never mutates ``account``."""
    return games_played_today(account, game_day(now)) < MAX_GAMES_PER_DAY


@dataclass(frozen=True)
class PlayRecord:
    wallet_address: str
    games_played_today: int
    games_remaining: int
    game_date: date


async def record_play(
    store: AccountStore,
    wallet_address: str,
    now: datetime | None = None,
    attempts: int = DEFAULT_ATTEMPTS,
) -> PlayRecord:
    """Register one play against today's quota.

    Raises:
        QuotaExceeded: the account already played ``MAX_GAMES_PER_DAY`` today.
    """
    today = game_day(now)

    def _apply(account: Account) -> int:
        if account.last_game_date is None or account.last_game_date < today:
            account.daily_games_played = 0
            account.last_game_date = today
        if account.daily_games_played >= MAX_GAMES_PER_DAY:
            raise QuotaExceeded(f"Daily limit of {MAX_GAMES_PER_DAY} games reached")
        account.daily_games_played += 1
        return account.daily_games_played

    try:
        saved, played = await apply_to_account(store, wallet_address, _apply, attempts)
    except QuotaExceeded:
        logger.info("game_quota_exceeded", wallet=wallet_address, game_date=today.isoformat())
        raise

    logger.info("game_play_recorded", wallet=saved.wallet_address, games_played_today=played)
    return PlayRecord(
        wallet_address=saved.wallet_address,
        games_played_today=played,
        games_remaining=MAX_GAMES_PER_DAY - played,
        game_date=today,
    )
