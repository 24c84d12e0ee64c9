"""Wikidata-backed implementation of the fact store port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from nvrsync.domain.errors import AmbiguousResultError

from .translator import (
    ENTITY_URI,
    claim_to_wire,
    draft_to_wire,
    item_from_wire,
    removal_to_wire,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nvrsync.domain.model import Claim, RemoteItem
    from nvrsync.domain.ports import ItemDraft

    from .client import SparqlClient, WikidataClient

log = getLogger(__name__)

NVRID_PROPERTY: Final[str] = "P3613"


def sparql_literal(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def item_by_identifier_query(key: str, identifier_property: str = NVRID_PROPERTY) -> str:
    return (
        f"SELECT ?item WHERE {{ ?item wdt:{identifier_property} ?value."
        f" FILTER (?value IN ({sparql_literal(key)}))"
        ' SERVICE wikibase:label { bd:serviceParam wikibase:language "[AUTO_LANGUAGE],en". }'
        "} LIMIT 2"
    )


def unique_label_query(label: str, language: str) -> str:
    return (
        "SELECT ?item ?itemLabel WHERE {"
        f" ?item rdfs:label {sparql_literal(label)}@{language}. }} limit 2"
    )


class WikidataFactStore:
    def __init__(
        self,
        *,
        client: WikidataClient,
        sparql: SparqlClient,
        label_sparql: SparqlClient | None = None,
        identifier_property: str = NVRID_PROPERTY,
    ) -> None:
        self._client = client
        self._sparql = sparql
        self._label_sparql = label_sparql or sparql
        self._identifier_property = identifier_property

    def find_item(self, key: str) -> str | None:
        return self.run_single_result_query(
            item_by_identifier_query(key, self._identifier_property)
        )

    def get_item(self, item_id: str) -> RemoteItem:
        return item_from_wire(self._client.get_entity(item_id))

    def create_item(self, draft: ItemDraft, *, summary: str) -> RemoteItem:
        entity = self._client.create_item(draft_to_wire(draft), summary=summary)
        return item_from_wire(entity)

    def commit_delta(
        self,
        item_id: str,
        *,
        to_add: Sequence[Claim],
        to_delete: Sequence[Claim],
        summary: str,
    ) -> None:
        claims = [claim_to_wire(claim) for claim in to_add]
        claims.extend(removal_to_wire(claim) for claim in to_delete)
        self._client.edit_claims(item_id, claims, summary=summary)

    def lookup_single_by_unique_label(self, text: str, language: str) -> str | None:
        return self._single_item(self._label_sparql, unique_label_query(text, language))

    def run_single_result_query(self, query: str) -> str | None:
        return self._single_item(self._sparql, query)

    def missing_entities(self, ids: Iterable[str]) -> list[str]:
        wanted = list(dict.fromkeys(ids))
        entities = self._client.get_entities(wanted)
        return [
            entity_id
            for entity_id in wanted
            if entity_id not in entities or not entities[entity_id].exists
        ]

    @staticmethod
    def _single_item(sparql: SparqlClient, query: str) -> str | None:
        bindings = sparql.select(query).results.bindings
        if len(bindings) > 1:
            raise AmbiguousResultError(f"Expected a single result, got {len(bindings)}: {query}")
        if not bindings:
            return None
        item = bindings[0].get("item")
        if item is None:
            raise AmbiguousResultError(f"Result lacks ?item binding: {query}")
        return item.value.removeprefix(ENTITY_URI)
