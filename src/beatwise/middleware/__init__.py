"""Middleware registration."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from beatwise.config import Settings
from beatwise.middleware.error_handler import setup_error_handlers
from beatwise.middleware.logging import setup_logging
from beatwise.middleware.rate_limit import RateLimitMiddleware
from beatwise.middleware.request_id import RequestIdMiddleware

EXPOSED_HEADERS = ["X-Request-Id", "X-RateLimit-Remaining", "X-RateLimit-Limit"]


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and the middleware stack.

    Starlette runs middleware in reverse-add order: CORS is added last so it
    also wraps 429s from the rate limiter, and the request id is bound before
    the limiter logs.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        prefix_limits={"/api/v1/auth/": settings.auth_rate_limit_requests},
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=EXPOSED_HEADERS,
    )
