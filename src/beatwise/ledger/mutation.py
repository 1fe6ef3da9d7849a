"""Read-modify-write loop over a single account.

All ledger writes go through ``apply_to_account``: load the account, run a
synchronous mutation on the loaded copy, save with the version check. A
``VersionConflict`` means someone else won the race; the loop re-reads and
re-runs the mutation, so the mutation sees the winner's state and its own
precondition checks (already completed, quota, ...) are evaluated again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

import structlog

from beatwise.accounts.models import Account, normalize_wallet_address
from beatwise.accounts.store import AccountStore
from beatwise.ledger.errors import Conflict, NotFound, VersionConflict

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3


async def apply_to_account(
    store: AccountStore,
    wallet_address: str,
    mutate: Callable[[Account], T],
    attempts: int = DEFAULT_ATTEMPTS,
) -> tuple[Account, T]:
    """Apply ``mutate`` atomically to one account.

    Returns (saved account, mutate's return value).

    Raises:
        NotFound: the account does not exist.
        Conflict: every attempt lost an optimistic-concurrency race.
        LedgerError: whatever ``mutate`` raises, unchanged; nothing is saved.
    """
    wallet_address = normalize_wallet_address(wallet_address)
    for attempt in range(1, attempts + 1):
        account = await store.find_one(wallet_address)
        if account is None:
            raise NotFound(f"Account {wallet_address} not found")

        result = mutate(account)

        try:
            saved = await store.save(account)
        except VersionConflict:
            logger.info("account_version_conflict", wallet=wallet_address, attempt=attempt)
            continue
        return saved, result

    logger.warning("account_update_gave_up", wallet=wallet_address, attempts=attempts)
    raise Conflict()
