"""Middleware tests: request ID, rate limiting, CORS, error handling."""

import pytest
from httpx import ASGITransport, AsyncClient

from beatwise.config import get_settings
from beatwise.ledger.errors import Conflict


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert len(response.headers["x-request-id"]) == 36


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_rate_limit_headers(client: AsyncClient) -> None:
    response = await client.get("/version")
    assert response.headers["x-ratelimit-limit"] == str(get_settings().rate_limit_requests)
    assert "x-ratelimit-remaining" in response.headers


@pytest.mark.asyncio
async def test_rate_limit_counts_per_bucket_and_client(client: AsyncClient, fake_redis) -> None:
    await client.get("/version")
    await client.get("/version")
    counters = {k: v for k, v in fake_redis.data.items() if k.startswith("ratelimit:")}
    assert len(counters) == 1
    key, count = next(iter(counters.items()))
    assert key.startswith("ratelimit:api:127.0.0.1:")
    assert count == 2


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient) -> None:
    limit = get_settings().rate_limit_requests
    for _ in range(limit):
        await client.get("/version")
    response = await client.get("/version")
    assert response.status_code == 429
    assert "retry-after" in response.headers
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_auth_endpoints_have_own_bucket(client: AsyncClient) -> None:
    auth_limit = get_settings().auth_rate_limit_requests
    for _ in range(auth_limit):
        await client.post("/api/v1/auth/challenge", json={"wallet_address": "0x" + "ab" * 20})
    blocked = await client.post("/api/v1/auth/challenge", json={"wallet_address": "0x" + "ab" * 20})
    assert blocked.status_code == 429
    assert blocked.headers["x-ratelimit-limit"] == str(auth_limit)

    # The general bucket is untouched.
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.headers["x-ratelimit-limit"] == str(get_settings().rate_limit_requests)


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient) -> None:
    for _ in range(get_settings().rate_limit_requests + 10):
        response = await client.get("/health")
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_no_redis_means_no_limit(client: AsyncClient) -> None:
    from beatwise.redis_client import use_redis

    use_redis(None)
    response = await client.get("/version")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    response = await client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert "access-control-allow-origin" in response.headers


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_invalid_wallet_is_422(client: AsyncClient) -> None:
    response = await client.get("/api/v1/accounts/not-a-wallet")
    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


@pytest.mark.asyncio
async def test_ledger_error_shape(app) -> None:
    @app.get("/boom-conflict")
    async def boom() -> None:
        raise Conflict()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/boom-conflict")
    assert response.status_code == 409
    assert response.json() == {"detail": "Concurrent update, please retry", "error": "conflict"}
    assert response.headers["retry-after"] == "1"


@pytest.mark.asyncio
async def test_unhandled_error_is_json_500(app) -> None:
    @app.get("/boom")
    async def boom() -> None:
        raise ValueError("kaboom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
