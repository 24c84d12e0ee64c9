from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

import pytest

from nvrsync.adapters.wikidata import WikidataClient, WikidataFactStore
from nvrsync.adapters.wikidata.schema import SparqlResponse
from nvrsync.adapters.wikidata.store import item_by_identifier_query, unique_label_query
from nvrsync.domain.errors import AmbiguousResultError
from nvrsync.domain.model import Claim, QuantityValue, Snak, StringValue
from nvrsync.domain.ports import FactStore, ItemDraft


def _bindings(*item_ids: str) -> dict[str, Any]:
    return {
        "head": {"vars": ["item"]},
        "results": {
            "bindings": [
                {"item": {"type": "uri", "value": f"http://www.wikidata.org/entity/{item_id}"}}
                for item_id in item_ids
            ]
        },
    }


class FakeSparql:
    def __init__(self, *item_ids: str) -> None:
        self.payload = _bindings(*item_ids)
        self.queries: list[str] = []

    def select(self, query: str) -> SparqlResponse:
        self.queries.append(query)
        return SparqlResponse.model_validate(self.payload)


class FakeSession:
    """Stands in for a MediaWiki session; returns canned payloads per action."""

    def __init__(self, entities: dict[str, Any] | None = None) -> None:
        self.entities = entities or {}
        self.gets: list[dict[str, Any]] = []
        self.posts: list[dict[str, Any]] = []

    def get(self, params: dict[str, Any]) -> dict[str, Any]:
        self.gets.append(dict(params))
        ids = str(params["ids"]).split("|")
        return {
            "entities": {
                entity_id: self.entities.get(entity_id, {"id": entity_id, "missing": ""})
                for entity_id in ids
            },
            "success": 1,
        }

    def post(self, params: dict[str, Any]) -> dict[str, Any]:
        self.posts.append(dict(params))
        return {"entity": {"id": params.get("id", "Q999"), "type": "item"}, "success": 1}


def _store(
    session: FakeSession, sparql: FakeSparql, labels: FakeSparql | None = None
) -> WikidataFactStore:
    return WikidataFactStore(
        client=WikidataClient(session),  # type: ignore[arg-type]
        sparql=sparql,  # type: ignore[arg-type]
        label_sparql=labels,  # type: ignore[arg-type]
    )


def test_store_satisfies_port() -> None:
    assert isinstance(_store(FakeSession(), FakeSparql()), FactStore)


def test_identifier_query_shape() -> None:
    query = item_by_identifier_query('20"01')

    assert "wdt:P3613" in query
    assert 'FILTER (?value IN ("20\\"01"))' in query
    assert query.endswith("LIMIT 2")


def test_find_item_strips_entity_uri() -> None:
    sparql = FakeSparql("Q30180845")

    assert _store(FakeSession(), sparql).find_item("2000001") == "Q30180845"
    assert '"2000001"' in sparql.queries[0]


def test_find_item_none_and_ambiguous() -> None:
    assert _store(FakeSession(), FakeSparql()).find_item("2000001") is None
    with pytest.raises(AmbiguousResultError):
        _store(FakeSession(), FakeSparql("Q1", "Q2")).find_item("2000001")


def test_unique_label_lookup_uses_label_client() -> None:
    sparql = FakeSparql()
    labels = FakeSparql("Q700")

    result = _store(FakeSession(), sparql, labels).lookup_single_by_unique_label(
        "Stiftelsen Skogen", "sv"
    )

    assert result == "Q700"
    assert labels.queries == [unique_label_query("Stiftelsen Skogen", "sv")]
    assert '"Stiftelsen Skogen"@sv' in labels.queries[0]
    assert sparql.queries == []


def test_get_item_translates_entity() -> None:
    session = FakeSession(
        {
            "Q1": {
                "id": "Q1",
                "claims": {
                    "P3613": [
                        {
                            "id": "Q1$a",
                            "mainsnak": {
                                "snaktype": "value",
                                "property": "P3613",
                                "datavalue": {"type": "string", "value": "2000001"},
                            },
                        }
                    ]
                },
            }
        }
    )

    item = _store(session, FakeSparql()).get_item("Q1")

    assert item.claims_for("P3613")[0].value == StringValue("2000001")


def test_commit_delta_sends_additions_and_removals() -> None:
    session = FakeSession()
    added = Claim(mainsnak=Snak("P2046", QuantityValue(Decimal("1.5"), "Q35852")))
    removed = Claim(mainsnak=Snak("P2046", QuantityValue(Decimal("1"), "Q35852")), claim_id="Q1$x")

    _store(session, FakeSparql()).commit_delta(
        "Q1", to_add=[added], to_delete=[removed], summary="Bot updated"
    )

    [post] = session.posts
    assert post["action"] == "wbeditentity"
    assert post["id"] == "Q1"
    assert post["summary"] == "Bot updated"
    claims = json.loads(post["data"])["claims"]
    assert claims[0]["mainsnak"]["datavalue"]["value"]["amount"] == "+1.5"
    assert claims[1] == {"id": "Q1$x", "remove": ""}


def test_create_item_posts_new_entity() -> None:
    session = FakeSession()
    draft = ItemDraft(labels={"sv": "Tyresta"})

    item = _store(session, FakeSparql()).create_item(draft, summary="Created")

    assert item.id == "Q999"
    assert session.posts[0]["new"] == "item"


def test_missing_entities_are_reported() -> None:
    session = FakeSession({"P31": {"id": "P31", "type": "property"}})

    missing = _store(session, FakeSparql()).missing_entities(["P31", "Q404", "P31"])

    assert missing == ["Q404"]
    assert session.gets[0]["ids"] == "P31|Q404"


def test_entities_are_fetched_in_chunks() -> None:
    session = FakeSession()

    WikidataClient(session).get_entities([f"Q{n}" for n in range(120)])  # type: ignore[arg-type]

    assert [len(params["ids"].split("|")) for params in session.gets] == [50, 50, 20]
