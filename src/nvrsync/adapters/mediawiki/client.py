"""MediaWiki action API session shared by the Wikidata and Commons adapters."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from nvrsync.adapters.http_resilience import ResilientClient
from nvrsync.config.http_resilience import RetryablePayloadError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    import httpx

    from nvrsync.config.http_resilience import ResilienceConfig
    from nvrsync.config.wikimedia import BotCredentials

log = getLogger(__name__)

type Params = Mapping[str, str | int]

DEFAULT_MAXLAG_RETRIES: Final[int] = 1000
DEFAULT_MAXLAG_WAIT_SECONDS: Final[float] = 6.0
_RETRYABLE_CODES: Final[frozenset[str]] = frozenset({"maxlag", "ratelimited"})


class MediaWikiAPIError(RuntimeError):
    """Raised when the API answers with an ``error`` object."""

    def __init__(self, code: str, info: str) -> None:
        super().__init__(f"{code}: {info}")
        self.code = code
        self.info = info


class MediaWikiSession:
    """Synchronous facade over one logged-in API session.

    Requests run on a private event loop that stays open for the lifetime of
    the session, so the underlying client and its cookies are reused.
    """

    def __init__(
        self,
        *,
        config: ResilienceConfig,
        credentials: BotCredentials | None = None,
        maxlag: int | None = None,
        maxlag_retries: int = DEFAULT_MAXLAG_RETRIES,
        maxlag_wait_seconds: float = DEFAULT_MAXLAG_WAIT_SECONDS,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._maxlag = maxlag
        self._maxlag_retries = maxlag_retries
        self._maxlag_wait_seconds = maxlag_wait_seconds
        self._client_factory = client_factory or ResilientClient
        self._runner = asyncio.Runner()
        self._client: ResilientClient | None = None
        self._csrf_token: str | None = None
        self._logged_in = False

    def __enter__(self) -> MediaWikiSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._runner.run(self._client.aclose())
            self._client = None
        self._runner.close()

    def get(self, params: Params) -> dict[str, Any]:
        return self._runner.run(self._request("GET", params))

    def post(self, params: Params) -> dict[str, Any]:
        """POST a write action, logging in and attaching the CSRF token."""

        return self._runner.run(self._post_with_token(params))

    def login(self) -> None:
        self._runner.run(self._ensure_login())

    async def _ensure_login(self) -> None:
        if self._logged_in or self._credentials is None:
            return
        tokens = await self._request("GET", {"action": "query", "meta": "tokens", "type": "login"})
        login_token = tokens["query"]["tokens"]["logintoken"]
        payload = await self._request(
            "POST",
            {
                "action": "login",
                "lgname": self._credentials.username,
                "lgpassword": self._credentials.password,
                "lgtoken": login_token,
            },
        )
        result = payload.get("login", {}).get("result")
        if result != "Success":
            reason = payload.get("login", {}).get("reason", result)
            raise MediaWikiAPIError("login-failed", str(reason))
        self._logged_in = True
        log.info("Logged in to %s as %s", self._config.name, self._credentials.username)

    async def _fetch_csrf_token(self) -> str:
        payload = await self._request("GET", {"action": "query", "meta": "tokens"})
        return str(payload["query"]["tokens"]["csrftoken"])

    async def _post_with_token(self, params: Params) -> dict[str, Any]:
        await self._ensure_login()
        if self._csrf_token is None:
            self._csrf_token = await self._fetch_csrf_token()
        write_params: dict[str, str | int] = {**params, "token": self._csrf_token, "bot": 1}
        if self._maxlag is not None:
            write_params["maxlag"] = self._maxlag
        try:
            return await self._request("POST", write_params)
        except MediaWikiAPIError as exc:
            if exc.code != "badtoken":
                raise
            log.info("CSRF token expired for %s, refreshing", self._config.name)
            self._csrf_token = await self._fetch_csrf_token()
            write_params["token"] = self._csrf_token
            return await self._request("POST", write_params)

    async def _request(self, method: str, params: Params) -> dict[str, Any]:
        attempt = 0
        while True:
            try:
                return await self._request_once(method, params)
            except RetryablePayloadError as exc:
                attempt += 1
                if attempt > self._maxlag_retries:
                    raise
                wait = _retry_after(exc.response, self._maxlag_wait_seconds)
                log.warning(
                    "%s lagged (%s), retry %d in %.0fs", self._config.name, exc, attempt, wait
                )
                await asyncio.sleep(wait)

    async def _request_once(self, method: str, params: Params) -> dict[str, Any]:
        client = self._get_client()
        query: dict[str, str | int] = {**params, "format": "json", "formatversion": 2}
        if method == "GET":
            response = await client.get("", params=query)
        else:
            response = await client.post("", data=query)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise MediaWikiAPIError("bad-payload", "Unexpected API response payload")
        error = payload.get("error")
        if isinstance(error, dict):
            code = str(error.get("code", "unknown"))
            info = str(error.get("info", ""))
            if code in _RETRYABLE_CODES:
                raise RetryablePayloadError(f"{code}: {info}", response=response)
            raise MediaWikiAPIError(code, info)
        return payload

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config)
        return self._client


def _retry_after(response: httpx.Response, default: float) -> float:
    header = response.headers.get("Retry-After")
    try:
        return max(float(header), 1.0) if header else default
    except ValueError:
        return default
