"""Shared FastAPI dependencies."""

from __future__ import annotations

import secrets
from collections.abc import AsyncGenerator, Callable

from fastapi import Header, HTTPException, Request
from redis.asyncio import Redis

from beatwise.accounts.store import AccountStore
from beatwise.auth.service import SignatureVerifier
from beatwise.auth.signature import verify_wallet_signature
from beatwise.config import get_settings
from beatwise.quests.tasks import Task
from beatwise.quests.verifiers import Verifier, build_verifier
from beatwise.redis_client import get_redis as _get_redis

VerifierFactory = Callable[[Task], Verifier]


def get_account_store(request: Request) -> AccountStore:
    """The store installed on the app at startup."""
    store: AccountStore | None = getattr(request.app.state, "account_store", None)
    if store is None:
        raise RuntimeError("Account store not initialized")
    return store


async def get_redis_dep() -> AsyncGenerator[Redis, None]:
    """Yield the Redis client as a FastAPI dependency."""
    yield _get_redis()


def get_signature_verifier() -> SignatureVerifier:
    return verify_wallet_signature


def get_verifier_factory() -> VerifierFactory:
    """Task -> membership verifier built from settings."""
    settings = get_settings()
    return lambda task: build_verifier(task, settings)


def require_admin(x_admin_key: str | None = Header(default=None)) -> None:
    """Admin guard; routes are disabled while ``admin_api_key`` is unset."""
    settings = get_settings()
    if not settings.admin_api_key:
        raise HTTPException(status_code=403, detail="Admin access disabled")
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        raise HTTPException(status_code=403, detail="Invalid admin key")
