"""
Account lifecycle.

Accounts are created on first sight of a wallet address (signature login or
an inbound social linkage callback) and are never deleted.
"""

from __future__ import annotations

from typing import Any

import structlog

from beatwise.accounts.invite_codes import MAX_GENERATION_ATTEMPTS, generate_invite_code
from beatwise.accounts.models import Account, normalize_wallet_address
from beatwise.accounts.store import AccountStore, InviteCodeTaken
from beatwise.ledger.errors import NotFound
from beatwise.ledger.mutation import apply_to_account

logger = structlog.get_logger()


async def get_account(store: AccountStore, wallet_address: str) -> Account:
    """Fetch an account by wallet address or raise NotFound."""
    wallet = normalize_wallet_address(wallet_address)
    account = await store.find_one(wallet)
    if account is None:
        raise NotFound(f"Account {wallet} not found")
    return account


async def find_or_create_account(store: AccountStore, wallet_address: str) -> tuple[Account, bool]:
    """
    Get the account for a wallet or create it with a fresh invite code.

    Returns:
        Tuple of (account, created) where created is True if a new account was made.
    """
    wallet = normalize_wallet_address(wallet_address)
    existing = await store.find_one(wallet)
    if existing is not None:
        return existing, False

    for _ in range(MAX_GENERATION_ATTEMPTS):
        candidate = Account(wallet_address=wallet, invite_code=generate_invite_code())
        try:
            account, created = await store.create(candidate)
        except InviteCodeTaken:
            continue
        if created:
            logger.info("account_created", wallet=wallet, invite_code=account.invite_code)
        return account, created
    raise RuntimeError(f"Failed to generate unique invite code after {MAX_GENERATION_ATTEMPTS} attempts")


async def link_identity(
    store: AccountStore,
    wallet_address: str,
    platform: str,
    identity: dict[str, Any],
) -> Account:
    """Record descriptive platform metadata. Grants no points."""
    account, _ = await find_or_create_account(store, wallet_address)

    def _apply(acc: Account) -> None:
        acc.external_identities[platform] = dict(identity)

    saved, _ = await apply_to_account(store, account.wallet_address, _apply)
    logger.info("identity_linked", wallet=saved.wallet_address, platform=platform, platform_id=identity.get("id"))
    return saved
