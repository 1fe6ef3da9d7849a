"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from beatwise.accounts.router import router as accounts_router
from beatwise.accounts.store import AccountStore
from beatwise.auth.router import router as auth_router
from beatwise.config import get_settings
from beatwise.db.session import close_account_store, open_account_store
from beatwise.games.router import router as games_router
from beatwise.health.router import router as health_router
from beatwise.leaderboard.router import router as leaderboard_router
from beatwise.middleware import setup_middleware
from beatwise.quests.router import router as quests_router
from beatwise.redis_client import close_redis, init_redis
from beatwise.referrals.router import router as referrals_router
from beatwise.social.router import router as social_router

logger = structlog.get_logger()


def create_app(account_store: AccountStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    An injected ``account_store`` is used as-is and no database engine is
    started; otherwise the store comes from ``database_url``.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        owns_store = account_store is None
        app.state.account_store = await open_account_store(settings.database_url) if owns_store else account_store
        await init_redis(settings.redis_url)
        logger.info("app_started", environment=settings.environment, store=type(app.state.account_store).__name__)

        yield

        if owns_store:
            await close_account_store()
        await close_redis()

    app = FastAPI(
        title="BeatWise API",
        description="Points ledger, quests, referrals and leaderboards",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    if account_store is not None:
        app.state.account_store = account_store

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(accounts_router)
    app.include_router(social_router)
    app.include_router(quests_router)
    app.include_router(games_router)
    app.include_router(referrals_router)
    app.include_router(leaderboard_router)

    return app


app = create_app()
