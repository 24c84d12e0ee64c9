from __future__ import annotations

import asyncio

import httpx

from nvrsync.adapters.http_resilience import ResilientClient
from nvrsync.config import RateLimit, ResilienceConfig, RetryPolicy

CONFIG = ResilienceConfig(
    name="sparql",
    base_url="https://query.test/sparql",
    retry=RetryPolicy(total=2, backoff_factor=0.0),
    ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    default_headers={"User-Agent": "Naturvardsregistret_bot/0.1 (bot@example.org)"},
)


def _get(transport: httpx.MockTransport, url: str = "") -> httpx.Response:
    async def run() -> httpx.Response:
        async with ResilientClient(CONFIG, transport=transport) as client:
            return await client.get(url, params={"format": "json"})

    return asyncio.run(run())


def test_empty_url_targets_endpoint_exactly() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    _get(httpx.MockTransport(handler))

    [request] = seen
    assert str(request.url) == "https://query.test/sparql?format=json"
    assert request.headers["User-Agent"] == "Naturvardsregistret_bot/0.1 (bot@example.org)"


def test_server_errors_are_retried() -> None:
    statuses = [503, 200]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(statuses.pop(0), json={})

    response = _get(httpx.MockTransport(handler))

    assert response.status_code == 200
    assert statuses == []
