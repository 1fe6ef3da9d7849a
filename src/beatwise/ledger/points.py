"""Points ledger: credits, game results and admin resets."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from beatwise.accounts.models import Account, PointCategory
from beatwise.accounts.store import AccountStore
from beatwise.ledger.errors import InvalidAmount
from beatwise.ledger.mutation import DEFAULT_ATTEMPTS, apply_to_account

logger = structlog.get_logger()


def validate_amount(amount: object) -> int:
    """Amounts are positive integers. ``bool`` is not an amount."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(f"Amount must be a positive integer, got {amount!r}")
    return amount


def credit_account(account: Account, category: PointCategory, amount: int) -> int:
    """Add ``amount`` to one counter in place. Returns the new total."""
    validate_amount(amount)
    setattr(account, category.field_name, account.points(category) + amount)
    return account.total_points


async def credit(
    store: AccountStore,
    wallet_address: str,
    category: PointCategory,
    amount: int,
    attempts: int = DEFAULT_ATTEMPTS,
) -> int:
    """Credit points to an account. Returns the new total points."""
    validate_amount(amount)
    saved, total = await apply_to_account(
        store,
        wallet_address,
        lambda account: credit_account(account, category, amount),
        attempts,
    )
    logger.info(
        "points_credited",
        wallet=wallet_address,
        category=category.value,
        amount=amount,
        total_points=saved.total_points,
    )
    return total


@dataclass(frozen=True)
class GameResult:
    wallet_address: str
    points_added: int
    previous_game_points: int
    game_points: int
    total_points: int
    high_score: int
    previous_high_score: int
    is_new_high_score: bool


async def submit_game_result(
    store: AccountStore,
    wallet_address: str,
    score: int,
    attempts: int = DEFAULT_ATTEMPTS,
) -> GameResult:
    """Credit a finished game's score as game points and track the high score.

    The high score only ever moves up.
    """
    validate_amount(score)

    def _apply(account: Account) -> GameResult:
        previous_points = account.game_points
        previous_high = account.high_score
        credit_account(account, PointCategory.GAME, score)
        is_new_high = score > account.high_score
        if is_new_high:
            account.high_score = score
        return GameResult(
            wallet_address=account.wallet_address,
            points_added=score,
            previous_game_points=previous_points,
            game_points=account.game_points,
            total_points=account.total_points,
            high_score=account.high_score,
            previous_high_score=previous_high,
            is_new_high_score=is_new_high,
        )

    _, result = await apply_to_account(store, wallet_address, _apply, attempts)
    if result.is_new_high_score:
        logger.info("new_high_score", wallet=wallet_address, high_score=result.high_score)
    logger.info("game_points_added", wallet=wallet_address, amount=score, game_points=result.game_points)
    return result


@dataclass(frozen=True)
class ResetResult:
    wallet_address: str
    previous_game_points: int
    game_points: int
    high_score: int
    total_points: int


async def reset_game_points(
    store: AccountStore,
    wallet_address: str,
    attempts: int = DEFAULT_ATTEMPTS,
) -> ResetResult:
    """Admin reset: zero game points, keep the high score and the record."""

    def _apply(account: Account) -> int:
        previous = account.game_points
        account.game_points = 0
        return previous

    saved, previous = await apply_to_account(store, wallet_address, _apply, attempts)
    logger.info("game_points_reset", wallet=wallet_address, previous_game_points=previous)
    return ResetResult(
        wallet_address=saved.wallet_address,
        previous_game_points=previous,
        game_points=saved.game_points,
        high_score=saved.high_score,
        total_points=saved.total_points,
    )
