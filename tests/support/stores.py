"""In-memory implementations of the store ports for testing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nvrsync.domain.errors import AmbiguousResultError
from nvrsync.domain.model import RemoteItem
from nvrsync.domain.progress import LedgerEntry, ProgressLedger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

    from nvrsync.domain.model import Claim, LocalObject
    from nvrsync.domain.ports import ItemDraft


@dataclass
class Commit:
    item_id: str
    to_add: list[Claim]
    to_delete: list[Claim]
    summary: str


class FakeFactStore:
    """Items keyed by identifier; commits are recorded, not applied."""

    def __init__(
        self,
        items: dict[str, RemoteItem] | None = None,
        *,
        keys: dict[str, str] | None = None,
        labels: dict[str, str | None] | None = None,
        missing: Iterable[str] = (),
        ambiguous_keys: Iterable[str] = (),
    ) -> None:
        self.items: dict[str, RemoteItem] = dict(items or {})
        self.keys: dict[str, str] = dict(keys or {})
        self.labels: dict[str, str | None] = dict(labels or {})
        self.missing = set(missing)
        self.ambiguous_keys = set(ambiguous_keys)
        self.created: list[ItemDraft] = []
        self.commits: list[Commit] = []
        self.label_lookups: list[tuple[str, str]] = []

    def find_item(self, key: str) -> str | None:
        if key in self.ambiguous_keys:
            raise AmbiguousResultError(f"Several items carry {key}")
        return self.keys.get(key)

    def get_item(self, item_id: str) -> RemoteItem:
        return self.items[item_id]

    def create_item(self, draft: ItemDraft, *, summary: str) -> RemoteItem:
        self.created.append(draft)
        item_id = f"Q{900 + len(self.created)}"
        grouped: dict[str, list[Claim]] = {}
        for claim in draft.claims:
            grouped.setdefault(claim.property_id, []).append(claim)
        item = RemoteItem(
            id=item_id,
            claims={prop: tuple(values) for prop, values in grouped.items()},
            labels=dict(draft.labels),
            descriptions=dict(draft.descriptions),
        )
        self.items[item_id] = item
        return item

    def commit_delta(
        self,
        item_id: str,
        *,
        to_add: Sequence[Claim],
        to_delete: Sequence[Claim],
        summary: str,
    ) -> None:
        self.commits.append(Commit(item_id, list(to_add), list(to_delete), summary))

    def lookup_single_by_unique_label(self, text: str, language: str) -> str | None:
        self.label_lookups.append((text, language))
        if text not in self.labels:
            return None
        result = self.labels[text]
        if result is None:
            raise AmbiguousResultError(f"Several items labelled {text}")
        return result

    def run_single_result_query(self, query: str) -> str | None:
        raise NotImplementedError(query)

    def missing_entities(self, ids: Iterable[str]) -> list[str]:
        return [entity_id for entity_id in ids if entity_id in self.missing]


class FakeDocumentStore:
    def __init__(self, documents: dict[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(documents or {})
        self.writes: list[tuple[str, str, str]] = []

    def get_document(self, title: str) -> str | None:
        return self.documents.get(title)

    def put_document(self, title: str, content: str, *, summary: str) -> None:
        self.writes.append((title, content, summary))
        self.documents[title] = content


@dataclass
class InMemoryLedgerStore:
    entries: dict[str, LedgerEntry] = field(default_factory=dict)
    saves: int = 0

    def load(self) -> ProgressLedger:
        return ProgressLedger(entries=dict(self.entries))

    def save(self, ledger: ProgressLedger) -> None:
        self.saves += 1
        self.entries = dict(ledger.entries)


class ListDatasetReader:
    def __init__(self, objects: Sequence[LocalObject]) -> None:
        self._objects = list(objects)

    def iter_objects(self) -> Iterator[LocalObject]:
        return iter(self._objects)
