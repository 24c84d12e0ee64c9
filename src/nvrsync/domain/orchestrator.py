"""Drive one reconciliation batch over a dataset snapshot."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import AmbiguousResultError, FatalBatchError, UnknownEntityError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .lookup import LookupContext
    from .model import LocalObject
    from .ports import DatasetReader, FactStore, LedgerStore
    from .progress import LedgerEntry, ProgressLedger
    from .reconciliation import ReconciliationEngine

    type EngineFactory = Callable[[LookupContext], ReconciliationEngine]

log = getLogger(__name__)

OPERATOR_LABEL_LANGUAGE = "sv"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchRequest:
    reprocess_before: datetime
    retained_generations: int
    verify_entities: bool = True


@dataclass(slots=True)
class BatchResult:
    """Outcome of a batch run."""

    processed: int = 0
    failed: int = 0
    skipped: int = 0


class ReconciliationOrchestrator:
    def __init__(
        self,
        *,
        facts: FactStore,
        dataset: DatasetReader,
        ledger_store: LedgerStore,
        lookup: LookupContext,
        engine_factory: EngineFactory,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._facts = facts
        self._dataset = dataset
        self._ledger_store = ledger_store
        self._lookup = lookup
        self._engine_factory = engine_factory
        self._clock = clock

    def run(self, request: BatchRequest) -> BatchResult:
        if request.verify_entities:
            self._verify_entities()
        objects = list(self._dataset.iter_objects())
        lookup = self.resolve_operators(objects)
        engine = self._engine_factory(lookup)

        ledger = self._ledger_store.load()
        log.info("Loaded ledger with %d previously processed objects", len(ledger))

        result = BatchResult()
        for local in objects:
            decision = ledger.decide(local.key, request.reprocess_before)
            log.info("%s: %s", local.key, decision)
            if not decision.should_process:
                result.skipped += 1
                continue

            entry, fatal = self._process(engine, ledger, local)
            result.processed += 1
            if entry.failed:
                result.failed += 1
            ledger.record(entry, retained_generations=request.retained_generations)
            self._ledger_store.save(ledger)
            if fatal is not None:
                raise fatal

        log.info(
            "Batch finished: processed=%s, failed=%s, skipped=%s",
            result.processed,
            result.failed,
            result.skipped,
        )
        return result

    def resolve_operators(self, objects: Sequence[LocalObject]) -> LookupContext:
        """Resolve operator names missing from the reference tables by unique label."""

        known = dict(self._lookup.operators)
        unresolved = {
            name
            for local in objects
            if (name := local.attribute("FORVALTARE")) is not None and name not in known
        }
        for name in sorted(unresolved):
            try:
                item_id = self._facts.lookup_single_by_unique_label(name, OPERATOR_LABEL_LANGUAGE)
            except AmbiguousResultError:
                log.warning("Operator %r matches several items by label", name)
                continue
            if item_id is None:
                log.warning("Operator %r is unknown, its operator claims will not be touched", name)
                continue
            log.info("Operator %r resolved by unique label as %s", name, item_id)
            known[name] = item_id
        return self._lookup.with_operators(known)

    def _verify_entities(self) -> None:
        missing = self._facts.missing_entities(self._lookup.all_ids())
        if missing:
            raise UnknownEntityError(f"Named entities missing remotely: {', '.join(missing)}")

    def _process(
        self, engine: ReconciliationEngine, ledger: ProgressLedger, local: LocalObject
    ) -> tuple[LedgerEntry, FatalBatchError | None]:
        entry = ledger.open_entry(local.key, self._clock())
        try:
            engine.reconcile(local, entry)
        except FatalBatchError as exc:
            log.exception("%s: fatal error, aborting batch", local.key)
            entry.error = traceback.format_exc()
            entry.ended = self._clock()
            return entry, exc
        except Exception:
            log.exception("%s: failed to process", local.key)
            entry.error = traceback.format_exc()
        entry.ended = self._clock()
        return entry, None
