"""Wallet login: one-time challenges in Redis and account find-or-create."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

import structlog
from redis.asyncio import Redis

from beatwise.accounts.models import Account, normalize_wallet_address
from beatwise.accounts.service import find_or_create_account
from beatwise.accounts.store import AccountStore

logger = structlog.get_logger()

SignatureVerifier = Callable[[str, str, str], bool]


class ChallengeNotFound(Exception):
    """No pending challenge for the address (never issued, expired or used)."""


class InvalidNonce(Exception):
    """The nonce does not match the pending challenge."""


class InvalidSignature(Exception):
    """The signature was not produced by the claimed wallet."""


@dataclass(frozen=True)
class Challenge:
    nonce: str
    timestamp: str
    message: str
    expires_in: int


def nonce_key(wallet_address: str) -> str:
    return f"auth:nonce:{wallet_address}"


def build_challenge_message(brand: str, wallet_address: str, nonce: str, timestamp: str) -> str:
    return (
        f"Sign this message to log in to {brand}.\n\n"
        f"Nonce: {nonce}\n"
        f"Timestamp: {timestamp}\n"
        f"Address: {wallet_address}"
    )


async def issue_challenge(redis: Redis, wallet_address: str, brand: str, expire_seconds: int) -> Challenge:
    """Store a fresh nonce for the wallet and return the message it must sign."""
    wallet = normalize_wallet_address(wallet_address)
    nonce = secrets.token_hex(16)
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    await redis.set(nonce_key(wallet), f"{nonce}:{timestamp}", ex=expire_seconds)

    return Challenge(
        nonce=nonce,
        timestamp=timestamp,
        message=build_challenge_message(brand, wallet, nonce, timestamp),
        expires_in=expire_seconds,
    )


async def authenticate(
    redis: Redis,
    store: AccountStore,
    verify_signature: SignatureVerifier,
    wallet_address: str,
    nonce: str,
    signature: str,
    brand: str,
) -> tuple[Account, bool]:
    """
    Consume the pending challenge, check the signature and load the account.

    Returns:
        Tuple of (account, is_new_user).
    """
    wallet = normalize_wallet_address(wallet_address)
    key = nonce_key(wallet)
    stored = await redis.get(key)
    if stored is None:
        raise ChallengeNotFound(wallet)

    stored_nonce, stored_timestamp = stored.split(":", 1)
    if not secrets.compare_digest(stored_nonce, nonce):
        raise InvalidNonce(wallet)

    # One-time use, also on a failed signature.
    await redis.delete(key)

    message = build_challenge_message(brand, wallet, stored_nonce, stored_timestamp)
    if not verify_signature(wallet, message, signature):
        logger.info("wallet_signature_rejected", wallet=wallet)
        raise InvalidSignature(wallet)

    account, created = await find_or_create_account(store, wallet)
    logger.info("wallet_authenticated", wallet=wallet, is_new_user=created)
    return account, created
