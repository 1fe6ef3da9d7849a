"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Request, Response, status

from beatwise.config import get_settings
from beatwise.redis_client import get_redis

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: 200 while the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(request: Request, response: Response) -> dict[str, object]:
    """Readiness probe: account store and Redis connectivity. 503 while degraded."""
    checks: dict[str, object] = {}

    store = getattr(request.app.state, "account_store", None)
    try:
        if store is None:
            raise RuntimeError("account store not initialized")
        await store.count()
        checks["store"] = "ok"
    except Exception as exc:  # noqa: BLE001
        checks["store"] = f"error: {exc}"

    try:
        redis = get_redis()
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:  # noqa: BLE001
        checks["redis"] = f"error: {exc}"

    if any(v != "ok" for v in checks.values()):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "degraded", "checks": checks}
    return {"status": "ready", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
