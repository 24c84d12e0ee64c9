"""Store wrappers that read through to the real stores but never write."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from nvrsync.domain.model import RemoteItem

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from nvrsync.domain.model import Claim
    from nvrsync.domain.ports import DocumentStore, FactStore, ItemDraft, LedgerStore
    from nvrsync.domain.progress import ProgressLedger

log = getLogger(__name__)


class DryRunFactStore:
    """Items that would be created come back as drafts without an id."""

    def __init__(self, inner: FactStore) -> None:
        self._inner = inner

    def find_item(self, key: str) -> str | None:
        return self._inner.find_item(key)

    def get_item(self, item_id: str) -> RemoteItem:
        return self._inner.get_item(item_id)

    def create_item(self, draft: ItemDraft, *, summary: str) -> RemoteItem:
        log.info("Dry run: would create item (%s) labelled %s", summary, dict(draft.labels))
        claims: dict[str, list[Claim]] = {}
        for claim in draft.claims:
            claims.setdefault(claim.property_id, []).append(claim)
        return RemoteItem(
            id=None,
            claims={prop: tuple(values) for prop, values in claims.items()},
            labels=dict(draft.labels),
            descriptions=dict(draft.descriptions),
        )

    def commit_delta(
        self,
        item_id: str,
        *,
        to_add: Sequence[Claim],
        to_delete: Sequence[Claim],
        summary: str,
    ) -> None:
        log.info(
            "Dry run: would commit %d additions and %d deletions to %s (%s)",
            len(to_add),
            len(to_delete),
            item_id,
            summary,
        )

    def lookup_single_by_unique_label(self, text: str, language: str) -> str | None:
        return self._inner.lookup_single_by_unique_label(text, language)

    def run_single_result_query(self, query: str) -> str | None:
        return self._inner.run_single_result_query(query)

    def missing_entities(self, ids: Iterable[str]) -> list[str]:
        return self._inner.missing_entities(ids)


class DryRunDocumentStore:
    """Writes land in a local overlay so later reads in the same run see them."""

    def __init__(self, inner: DocumentStore) -> None:
        self._inner = inner
        self._overlay: dict[str, str] = {}

    def get_document(self, title: str) -> str | None:
        if title in self._overlay:
            return self._overlay[title]
        return self._inner.get_document(title)

    def put_document(self, title: str, content: str, *, summary: str) -> None:
        log.info("Dry run: would save %s (%s)", title, summary)
        self._overlay[title] = content


class DryRunLedgerStore:
    """Reads the real ledger but keeps a dry run's entries in memory only."""

    def __init__(self, inner: LedgerStore) -> None:
        self._inner = inner
        self.last_saved: ProgressLedger | None = None

    def load(self) -> ProgressLedger:
        return self._inner.load()

    def save(self, ledger: ProgressLedger) -> None:
        log.debug("Dry run: ledger with %d entries not persisted", len(ledger))
        self.last_saved = ledger
