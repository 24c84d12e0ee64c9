"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from nvrsync.adapters.commons import CommonsDocumentStore
from nvrsync.adapters.dry_run import DryRunDocumentStore, DryRunFactStore, DryRunLedgerStore
from nvrsync.adapters.geojson import GeoJsonDatasetReader
from nvrsync.adapters.ledger_file import JsonLedgerStore
from nvrsync.adapters.mediawiki import MediaWikiSession
from nvrsync.adapters.reference_tables import load_operator_table
from nvrsync.adapters.wikidata import SparqlClient, WikidataClient, WikidataFactStore
from nvrsync.config import (
    get_object_kind,
    get_storage_config,
    get_sync_config,
    get_wikimedia_config,
)
from nvrsync.domain.lookup import LookupContext
from nvrsync.domain.orchestrator import BatchRequest, ReconciliationOrchestrator
from nvrsync.domain.reconciliation import GeoshapeDocumentSync, ReconciliationEngine

if TYPE_CHECKING:
    from datetime import date, datetime

    from nvrsync.config import ObjectKind, StorageConfig, WikimediaConfig
    from nvrsync.domain.orchestrator import BatchResult
    from nvrsync.domain.ports import DocumentStore, FactStore, LedgerStore
    from nvrsync.domain.progress import LedgerSummary

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class RunOptions:
    published: date
    retrieved: date
    reprocess_before: datetime | None = None
    retained_generations: int | None = None
    dry_run: bool = False
    sandbox: bool = False
    evaluate_geometry: bool = True
    verify_entities: bool = True


def ledger_store_for(kind: ObjectKind, storage: StorageConfig) -> JsonLedgerStore:
    return JsonLedgerStore(storage.progress_dir() / f"{kind.label}.json")


def build_lookup(storage: StorageConfig) -> LookupContext:
    operators = load_operator_table((storage.operators_path(), storage.municipalities_path()))
    return LookupContext().with_operators(operators)


def run_batch(
    kind_slug: str,
    options: RunOptions,
    *,
    storage: StorageConfig | None = None,
    wikimedia: WikimediaConfig | None = None,
    facts: FactStore | None = None,
    documents: DocumentStore | None = None,
) -> BatchResult:
    """Reconcile one object kind's dataset snapshot against Wikidata and Commons."""

    kind = get_object_kind(kind_slug)
    storage = storage or get_storage_config()
    defaults = get_sync_config()
    request = BatchRequest(
        reprocess_before=options.reprocess_before or defaults.reprocess_before,
        retained_generations=options.retained_generations or defaults.retained_generations,
        verify_entities=options.verify_entities,
    )
    log.info(
        "Starting %s batch: published=%s, retrieved=%s, reprocess_before=%s, dry_run=%s",
        kind.slug,
        options.published,
        options.retrieved,
        request.reprocess_before,
        options.dry_run,
    )

    with ExitStack() as stack:
        if facts is None or documents is None:
            wikimedia = wikimedia or get_wikimedia_config(storage=storage)
        if facts is None:
            session = stack.enter_context(
                MediaWikiSession(
                    config=wikimedia.wikidata,
                    credentials=wikimedia.credentials,
                    maxlag=wikimedia.maxlag_seconds,
                )
            )
            facts = WikidataFactStore(
                client=WikidataClient(session),
                sparql=stack.enter_context(SparqlClient(config=wikimedia.sparql)),
                label_sparql=stack.enter_context(SparqlClient(config=wikimedia.label_lookup)),
            )
        if documents is None:
            session = stack.enter_context(
                MediaWikiSession(
                    config=wikimedia.commons,
                    credentials=wikimedia.credentials,
                    maxlag=wikimedia.maxlag_seconds,
                )
            )
            documents = CommonsDocumentStore(session)
        ledger_store: LedgerStore = ledger_store_for(kind, storage)
        if options.dry_run:
            facts = DryRunFactStore(facts)
            documents = DryRunDocumentStore(documents)
            ledger_store = DryRunLedgerStore(ledger_store)

        def engine_factory(lookup: LookupContext) -> ReconciliationEngine:
            return ReconciliationEngine(
                facts=facts,
                geoshape=GeoshapeDocumentSync(documents, kind=kind, sandbox=options.sandbox),
                kind=kind,
                lookup=lookup,
                evaluate_geometry=options.evaluate_geometry,
            )

        orchestrator = ReconciliationOrchestrator(
            facts=facts,
            dataset=GeoJsonDatasetReader(
                [storage.dataset_path(name) for name in kind.dataset_files],
                published=options.published,
                retrieved=options.retrieved,
            ),
            ledger_store=ledger_store,
            lookup=build_lookup(storage),
            engine_factory=engine_factory,
        )
        result = orchestrator.run(request)

    log.info(
        "Finished %s batch: processed=%s, failed=%s, skipped=%s",
        kind.slug,
        result.processed,
        result.failed,
        result.skipped,
    )
    return result


def ledger_summary(kind_slug: str, *, storage: StorageConfig | None = None) -> LedgerSummary:
    kind = get_object_kind(kind_slug)
    ledger = ledger_store_for(kind, storage or get_storage_config()).load()
    return ledger.summary()
