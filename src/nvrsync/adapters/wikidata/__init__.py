"""Wikidata adapter package."""

from __future__ import annotations

from .client import SparqlClient, WikidataAPIError, WikidataClient
from .schema import SparqlResponse, WbGetEntitiesResponse, WikibaseEntity, WikibaseStatement
from .store import WikidataFactStore, item_by_identifier_query, unique_label_query

__all__ = [
    "SparqlClient",
    "SparqlResponse",
    "WbGetEntitiesResponse",
    "WikibaseEntity",
    "WikibaseStatement",
    "WikidataAPIError",
    "WikidataClient",
    "WikidataFactStore",
    "item_by_identifier_query",
    "unique_label_query",
]
