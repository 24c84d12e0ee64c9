from __future__ import annotations

from typing import Any

import pytest

from nvrsync.adapters.commons import CommonsDocumentStore
from nvrsync.adapters.mediawiki import MediaWikiAPIError
from nvrsync.domain.ports import DocumentStore


class FakeSession:
    def __init__(self, page: dict[str, Any], edit: dict[str, Any] | None = None) -> None:
        self.page = page
        self.edit = edit or {"edit": {"result": "Success", "newrevid": 42}}
        self.gets: list[dict[str, Any]] = []
        self.posts: list[dict[str, Any]] = []

    def get(self, params: dict[str, Any]) -> dict[str, Any]:
        self.gets.append(dict(params))
        return {"query": {"pages": [self.page]}}

    def post(self, params: dict[str, Any]) -> dict[str, Any]:
        self.posts.append(dict(params))
        return self.edit


def _store(session: FakeSession) -> CommonsDocumentStore:
    return CommonsDocumentStore(session)  # type: ignore[arg-type]


def test_store_satisfies_port() -> None:
    assert isinstance(_store(FakeSession({})), DocumentStore)


def test_get_document_reads_main_slot() -> None:
    session = FakeSession(
        {
            "title": "Data:Example.map",
            "revisions": [{"slots": {"main": {"contentmodel": "json", "content": '{"zoom": 12}'}}}],
        }
    )

    assert _store(session).get_document("Data:Example.map") == '{"zoom": 12}'
    assert session.gets[0]["rvslots"] == "main"
    assert session.gets[0]["titles"] == "Data:Example.map"


def test_missing_page_is_none() -> None:
    session = FakeSession({"title": "Data:Example.map", "missing": True})

    assert _store(session).get_document("Data:Example.map") is None


def test_put_document_edits_page() -> None:
    session = FakeSession({})

    _store(session).put_document("Data:Example.map", "{}", summary="Initial creation")

    assert session.posts == [
        {"action": "edit", "title": "Data:Example.map", "text": "{}", "summary": "Initial creation"}
    ]


def test_failed_edit_raises() -> None:
    session = FakeSession({}, edit={"edit": {"result": "Failure"}})

    with pytest.raises(MediaWikiAPIError):
        _store(session).put_document("Data:Example.map", "{}", summary="x")
