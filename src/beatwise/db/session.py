"""Engine lifecycle and account store selection.

``open_account_store`` is what the app lifespan calls: ``memory://`` gives a
process-local store, anything else is treated as an async SQLAlchemy URL.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from beatwise.accounts.sql_store import SqlAccountStore
from beatwise.accounts.store import AccountStore, InMemoryAccountStore

MEMORY_STORE_URL = "memory://"

_engine: AsyncEngine | None = None


def create_engine(url: str) -> AsyncEngine:
    kwargs: dict[str, object] = {"pool_pre_ping": True}
    if url.startswith("postgresql"):
        # pgbouncer in transaction mode cannot hold prepared statements.
        kwargs.update(pool_size=20, max_overflow=10, connect_args={"statement_cache_size": 0})
    return create_async_engine(url, **kwargs)


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def open_account_store(url: str) -> AccountStore:
    """Build the store for ``url``; SQL stores keep the engine until ``close_account_store``."""
    global _engine  # noqa: PLW0603
    if url == MEMORY_STORE_URL:
        return InMemoryAccountStore()
    _engine = create_engine(url)
    return SqlAccountStore(session_factory(_engine))


async def close_account_store() -> None:
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
