"""Wikidata API and SPARQL endpoint clients."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

from nvrsync.adapters.http_resilience import ResilientClient

from .schema import SparqlResponse, WbEditEntityResponse, WbGetEntitiesResponse, WikibaseEntity

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from nvrsync.adapters.mediawiki import MediaWikiSession
    from nvrsync.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

# wbgetentities accepts at most this many ids per request.
MAX_IDS_PER_REQUEST = 50


class WikidataAPIError(RuntimeError):
    """Raised when the Wikidata API returns an unexpected response."""


class WikidataClient:
    """Entity reads and writes through the Wikibase API."""

    def __init__(self, session: MediaWikiSession) -> None:
        self._session = session

    def get_entities(self, ids: Sequence[str]) -> dict[str, WikibaseEntity]:
        entities: dict[str, WikibaseEntity] = {}
        for start in range(0, len(ids), MAX_IDS_PER_REQUEST):
            chunk = ids[start : start + MAX_IDS_PER_REQUEST]
            payload = self._session.get(
                {"action": "wbgetentities", "ids": "|".join(chunk), "props": "info|claims"}
            )
            entities.update(WbGetEntitiesResponse.model_validate(payload).entities)
        return entities

    def get_entity(self, entity_id: str) -> WikibaseEntity:
        payload = self._session.get(
            {
                "action": "wbgetentities",
                "ids": entity_id,
                "props": "info|labels|descriptions|claims",
            }
        )
        entity = WbGetEntitiesResponse.model_validate(payload).entities.get(entity_id)
        if entity is None or not entity.exists:
            raise WikidataAPIError(f"Entity {entity_id} does not exist")
        return entity

    def create_item(self, data: dict[str, Any], *, summary: str) -> WikibaseEntity:
        payload = self._session.post(
            {
                "action": "wbeditentity",
                "new": "item",
                "data": json.dumps(data, ensure_ascii=False),
                "summary": summary,
            }
        )
        return WbEditEntityResponse.model_validate(payload).entity

    def edit_claims(
        self, entity_id: str, claims: list[dict[str, Any]], *, summary: str
    ) -> WikibaseEntity:
        payload = self._session.post(
            {
                "action": "wbeditentity",
                "id": entity_id,
                "data": json.dumps({"claims": claims}, ensure_ascii=False),
                "summary": summary,
            }
        )
        return WbEditEntityResponse.model_validate(payload).entity


class SparqlClient:
    """Read-only client for the query service.

    Like ``MediaWikiSession`` it keeps one event loop and one HTTP client for
    its lifetime, so connections and the response cache are shared by queries.
    """

    def __init__(
        self,
        *,
        config: ResilienceConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._runner = asyncio.Runner()
        self._client: ResilientClient | None = None

    def __enter__(self) -> SparqlClient:
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

    def select(self, query: str) -> SparqlResponse:
        if self._config.base_url is None:
            raise WikidataAPIError("Missing SPARQL base_url in resilience configuration")
        return self._runner.run(self._select_async(query))

    async def _select_async(self, query: str) -> SparqlResponse:
        response = await self._get_client().get("", params={"query": query, "format": "json"})
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise WikidataAPIError("Unexpected SPARQL response payload")
        return SparqlResponse.model_validate(payload)

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config)
        return self._client
