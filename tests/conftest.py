"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from beatwise.accounts.service import find_or_create_account
from beatwise.accounts.store import InMemoryAccountStore
from beatwise.config import get_settings
from beatwise.main import create_app
from beatwise.redis_client import use_redis

WALLET_A = "0x" + "a1" * 20
WALLET_B = "0x" + "b2" * 20
WALLET_C = "0x" + "c3" * 20


class FakeRedis:
    """In-process stand-in for the Redis commands the app calls.

    Challenges use get/set/delete, the rate limiter a pipelined incr + expire,
    readiness ping, shutdown aclose. TTLs are ignored.
    """

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    async def incr(self, key: str) -> int:
        self.data[key] = int(self.data.get(key, 0)) + 1
        return self.data[key]

    async def expire(self, key: str, seconds: int) -> bool:
        return key in self.data

    async def aclose(self) -> None:
        self.data.clear()

    def pipeline(self) -> FakePipeline:
        return FakePipeline(self)


class FakePipeline:
    def __init__(self, redis: FakeRedis) -> None:
        self._redis = redis
        self._ops: list[tuple[str, tuple[Any, ...]]] = []

    def incr(self, key: str) -> FakePipeline:
        self._ops.append(("incr", (key,)))
        return self

    def expire(self, key: str, seconds: int) -> FakePipeline:
        self._ops.append(("expire", (key, seconds)))
        return self

    async def execute(self) -> list[Any]:
        results = [await getattr(self._redis, name)(*args) for name, args in self._ops]
        self._ops.clear()
        return results


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Settings are cached process-wide; tests that patch env vars need a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> InMemoryAccountStore:
    return InMemoryAccountStore()


@pytest.fixture
def fake_redis() -> Iterator[FakeRedis]:
    redis = FakeRedis()
    use_redis(redis)  # type: ignore[arg-type]
    yield redis
    use_redis(None)


@pytest.fixture
def app(store: InMemoryAccountStore, fake_redis: FakeRedis):
    return create_app(account_store=store)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with an in-memory store and fake Redis."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def accounts(store: InMemoryAccountStore) -> dict[str, str]:
    """Three existing accounts. Returns wallet -> invite code."""
    codes = {}
    for wallet in (WALLET_A, WALLET_B, WALLET_C):
        account, _ = await find_or_create_account(store, wallet)
        codes[wallet] = account.invite_code
    return codes
