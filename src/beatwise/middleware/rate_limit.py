"""Fixed-window request limiting per client IP, counted in Redis.

Requests fall into buckets by path prefix. The wallet-auth endpoints mint a
Redis nonce per call and get their own, tighter bucket; everything else shares
the ``api`` bucket. Health probes are never counted.
"""

import time
from dataclasses import dataclass
from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from beatwise.redis_client import get_redis

logger = structlog.get_logger()

_EXEMPT_PATHS = frozenset({"/health", "/ready"})


@dataclass(frozen=True)
class Bucket:
    name: str
    limit: int


def rate_limit_key(bucket: str, client_ip: str, window: int) -> str:
    return f"ratelimit:{bucket}:{client_ip}:{window}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Return 429 once a client exceeds its bucket's limit in the current window."""

    def __init__(
        self,
        app: Any,  # noqa: ANN401
        requests_per_window: int = 120,
        window_seconds: int = 60,
        prefix_limits: dict[str, int] | None = None,
    ) -> None:
        super().__init__(app)
        self.default = Bucket("api", requests_per_window)
        self.window_seconds = window_seconds
        # Longest prefix wins.
        self.prefixed = [
            (prefix, Bucket(prefix.strip("/").replace("/", "."), limit))
            for prefix, limit in sorted((prefix_limits or {}).items(), key=lambda item: len(item[0]), reverse=True)
        ]

    def bucket_for(self, path: str) -> Bucket:
        for prefix, bucket in self.prefixed:
            if path.startswith(prefix):
                return bucket
        return self.default

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path in _EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        try:
            redis = get_redis()
        except RuntimeError:
            return await call_next(request)

        bucket = self.bucket_for(path)
        client_ip = request.client.host if request.client else "unknown"
        key = rate_limit_key(bucket.name, client_ip, int(time.time()) // self.window_seconds)

        pipe = redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.window_seconds + 1)
        count = int((await pipe.execute())[0])

        limit_headers = {
            "X-RateLimit-Limit": str(bucket.limit),
            "X-RateLimit-Remaining": str(max(0, bucket.limit - count)),
        }
        if count > bucket.limit:
            logger.info("rate_limited", bucket=bucket.name, client_ip=client_ip, count=count)
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later."},
                headers={"Retry-After": str(self.window_seconds), **limit_headers},
            )

        response = await call_next(request)
        response.headers.update(limit_headers)
        return response
