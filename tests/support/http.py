"""Mock transports for adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs

import httpx

from nvrsync.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from nvrsync.config import ResilienceConfig


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(handler))

    return factory


def request_params(request: httpx.Request) -> dict[str, str]:
    """Query parameters of a GET or form fields of a POST, single-valued."""

    if request.method == "GET":
        return dict(request.url.params)
    fields = parse_qs(request.content.decode("utf-8"), keep_blank_values=True)
    return {key: values[-1] for key, values in fields.items()}


def json_response(payload: Any, **kwargs: Any) -> httpx.Response:
    return httpx.Response(200, json=payload, **kwargs)
