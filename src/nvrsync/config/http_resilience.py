"""Retry, throttling and cache settings for the Wikimedia HTTP endpoints."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

import httpx
from httpx_retries import Retry

if TYPE_CHECKING:
    from collections.abc import Mapping

type CachePredicate = Callable[[Any], bool]

# Edits are POSTed; a retried edit either lands once or fails with an API error.
RETRY_METHODS: Final[tuple[str, ...]] = ("GET", "POST")
RETRY_STATUSES: Final[tuple[int, ...]] = (429, 500, 502, 503, 504)


class RetryablePayloadError(httpx.HTTPError):
    """Raised when a payload-level condition should trigger a retry.

    The MediaWiki API answers ``maxlag`` and ``ratelimited`` conditions with
    HTTP 200 and an ``error`` object, so status-based retries never see them.
    """

    def __init__(self, message: str, *, response: httpx.Response) -> None:
        super().__init__(message)
        self.response = response


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries for transient network and server failures."""

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    def to_retry(self) -> Retry:
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=True,
            allowed_methods=RETRY_METHODS,
            status_forcelist=RETRY_STATUSES,
            retry_on_exceptions=self.retry_on_exceptions,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """Response cache; ``sqlite_path=None`` keeps it in memory for the run."""

    enabled: bool = True
    sqlite_path: str | None = None
    ttl_seconds: float | None = None
    cache_predicate: CachePredicate | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None
