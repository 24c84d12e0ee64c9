"""Resumable progress ledger: one outcome record per processed object key."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

log = getLogger(__name__)


class ProcessDecision(StrEnum):
    PROCESS = "process"
    RETRY_FAILED = "retry-failed"
    REPROCESS_STALE = "reprocess-stale"
    SKIP = "skip"

    @property
    def should_process(self) -> bool:
        return self is not ProcessDecision.SKIP


@dataclass(slots=True, kw_only=True)
class LedgerEntry:
    """Outcome of processing one object once.

    ``previous`` chains to the entry this one superseded, newest first.
    """

    key: str
    started: datetime
    ended: datetime | None = None
    item_id: str | None = None
    created_item: bool = False
    created_document: bool = False
    updated_document: bool = False
    created_claims: list[str] = field(default_factory=list)
    modified_claims: list[str] = field(default_factory=list)
    deleted_claims: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
    previous: LedgerEntry | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def warn(self, message: str) -> None:
        log.warning("%s: %s", self.key, message)
        self.warnings.append(message)

    def history(self) -> Iterator[LedgerEntry]:
        entry: LedgerEntry | None = self
        while entry is not None:
            yield entry
            entry = entry.previous

    def truncate_history(self, retained: int) -> None:
        """Keep at most ``retained`` entries in the chain, this one included."""

        if retained < 1:
            raise ValueError("At least one generation must be retained")
        kept = 1
        entry = self
        while entry.previous is not None:
            if kept >= retained:
                entry.previous = None
                return
            entry = entry.previous
            kept += 1


def decide(previous: LedgerEntry | None, reprocess_before: datetime) -> ProcessDecision:
    if previous is None:
        return ProcessDecision.PROCESS
    if previous.failed:
        return ProcessDecision.RETRY_FAILED
    if previous.started < reprocess_before:
        return ProcessDecision.REPROCESS_STALE
    return ProcessDecision.SKIP


@dataclass(slots=True)
class ProgressLedger:
    """Most recent entry per object key for one object-kind batch."""

    entries: dict[str, LedgerEntry] = field(default_factory=dict)

    def get(self, key: str) -> LedgerEntry | None:
        return self.entries.get(key)

    def decide(self, key: str, reprocess_before: datetime) -> ProcessDecision:
        return decide(self.entries.get(key), reprocess_before)

    def open_entry(self, key: str, started: datetime) -> LedgerEntry:
        return LedgerEntry(key=key, started=started, previous=self.entries.get(key))

    def record(self, entry: LedgerEntry, *, retained_generations: int) -> None:
        entry.truncate_history(retained_generations)
        self.entries[entry.key] = entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[LedgerEntry]:
        return iter(self.entries.values())

    def summary(self) -> LedgerSummary:
        return LedgerSummary.from_ledger(self)


@dataclass(frozen=True, slots=True)
class LedgerSummary:
    processed: int
    failed: int
    created_items: int
    created_documents: int
    updated_documents: int
    with_warnings: int
    created_claims: Counter[str] = field(default_factory=Counter)
    modified_claims: Counter[str] = field(default_factory=Counter)
    deleted_claims: Counter[str] = field(default_factory=Counter)

    @classmethod
    def from_ledger(cls, ledger: ProgressLedger) -> LedgerSummary:
        entries = list(ledger)
        created: Counter[str] = Counter()
        modified: Counter[str] = Counter()
        deleted: Counter[str] = Counter()
        for entry in entries:
            created.update(entry.created_claims)
            modified.update(entry.modified_claims)
            deleted.update(entry.deleted_claims)
        return cls(
            processed=len(entries),
            failed=sum(1 for entry in entries if entry.failed),
            created_items=sum(1 for entry in entries if entry.created_item),
            created_documents=sum(1 for entry in entries if entry.created_document),
            updated_documents=sum(1 for entry in entries if entry.updated_document),
            with_warnings=sum(1 for entry in entries if entry.warnings),
            created_claims=created,
            modified_claims=modified,
            deleted_claims=deleted,
        )

    def lines(self) -> list[str]:
        lines = [
            f"Item processed: {self.processed}",
            f"Failed to process: {self.failed}",
            f"Created Wikidata item: {self.created_items}",
            f"Created Commons geoshape: {self.created_documents}",
            f"Updated Commons geoshape: {self.updated_documents}",
            f"Processed with warnings: {self.with_warnings}",
        ]
        for label, counter in (
            ("Created", self.created_claims),
            ("Modified", self.modified_claims),
            ("Deleted", self.deleted_claims),
        ):
            lines.extend(
                f"{label} Wikidata claim {name}: {count}"
                for name, count in sorted(counter.items())
            )
        return lines


@runtime_checkable
class LedgerStore(Protocol):
    """Persistence for one object-kind ledger."""

    def load(self) -> ProgressLedger:
        """Return the persisted ledger, empty when none exists yet."""
        ...

    def save(self, ledger: ProgressLedger) -> None:
        """Move the previous snapshot to the backup slot, then write ``ledger``."""
        ...
