from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import QueryParamTypes, RequestData, TimeoutTypes

    from nvrsync.config.http_resilience import CacheConfig, CachePredicate, ResilienceConfig

log = getLogger(__name__)

IN_MEMORY_DATABASE = ":memory:"


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    data: RequestData | None
    timeout: TimeoutTypes | UseClientDefault


class ResilientClient:
    """``httpx.AsyncClient`` with retries, client-side rate limiting and optional caching.

    One instance talks to one endpoint. Cookies live on the wrapped client, so a
    logged-in wiki session survives as long as the same ``ResilientClient`` is used.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )
        retry_transport = RetryTransport(transport=transport, retry=config.retry.to_retry())
        headers = dict(config.default_headers) if config.default_headers else None
        base_url = config.base_url or ""

        cache = config.cache
        if cache is not None and cache.enabled:
            self._client: httpx.AsyncClient = AsyncCacheClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=retry_transport,
                storage=_cache_storage(cache),
                policy=_cache_policy(cache.cache_predicate),
            )
        else:
            self._client = httpx.AsyncClient(
                base_url=base_url,
                timeout=config.timeout_seconds,
                headers=headers,
                transport=retry_transport,
            )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        target = self._resolve(url)
        if self._limiter is None:
            response = await self._client.request(method, target, **kwargs)
        else:
            async with self._limiter:
                response = await self._client.request(method, target, **kwargs)
        log.debug("%s: %s %s -> %d", self.config.name, method, target, response.status_code)
        return response

    def _resolve(self, url: str) -> str:
        # httpx appends "/" to base_url when joining, which the API and SPARQL endpoints reject.
        if not url and self.config.base_url:
            return self.config.base_url
        return url

    async def get(self, url: str, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)


class _JsonPredicateFilter(BaseFilter[HishelCacheResponse]):
    """Store a response only when its decoded JSON body passes the predicate."""

    def __init__(self, predicate: CachePredicate) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return False
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False
        return bool(self._predicate(payload))


def _cache_storage(config: CacheConfig) -> AsyncSqliteStorage:
    return AsyncSqliteStorage(
        database_path=config.sqlite_path or IN_MEMORY_DATABASE,
        default_ttl=config.ttl_seconds,
    )


def _cache_policy(predicate: CachePredicate | None) -> FilterPolicy | None:
    if predicate is None:
        return None
    return FilterPolicy(response_filters=[_JsonPredicateFilter(predicate)])
