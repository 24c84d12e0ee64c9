"""Compute and commit the delta between one local object and its remote item."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from nvrsync.domain.errors import UnsupportedGeometryError
from nvrsync.domain.geometry import GeometryExtractor
from nvrsync.domain.model import EntityIdValue, RemoteItem, StringValue
from nvrsync.domain.ports import ItemDraft

from .context import ReconciliationContext
from .facts import (
    reconcile_areas,
    reconcile_country,
    reconcile_inception,
    reconcile_iucn,
    reconcile_operator,
)
from .freshness import FreshnessPolicy
from .location import reconcile_coordinate

if TYPE_CHECKING:
    from nvrsync.config.object_kinds import ObjectKind
    from nvrsync.domain.lookup import LookupContext
    from nvrsync.domain.model import LocalObject
    from nvrsync.domain.ports import FactStore
    from nvrsync.domain.progress import LedgerEntry

    from .delta import ReconciliationDelta
    from .geoshape import GeoshapeDocumentSync

log = getLogger(__name__)

CREATE_SUMMARY: Final[str] = "Created by bot from data supplied by Naturvårdsverket"
COMMIT_SUMMARY: Final[str] = (
    "Bot updated due to delta found compared to local data from Naturvårdsverket"
)


class ReconciliationEngine:
    def __init__(
        self,
        *,
        facts: FactStore,
        geoshape: GeoshapeDocumentSync,
        kind: ObjectKind,
        lookup: LookupContext,
        extractor: GeometryExtractor | None = None,
        policy: FreshnessPolicy | None = None,
        evaluate_geometry: bool = True,
    ) -> None:
        self._facts = facts
        self._geoshape = geoshape
        self._kind = kind
        self._lookup = lookup
        self._extractor = extractor or GeometryExtractor()
        self._policy = policy or FreshnessPolicy()
        self._evaluate_geometry = evaluate_geometry

    def reconcile(self, local: LocalObject, entry: LedgerEntry) -> ReconciliationDelta:
        """Bring the remote item for ``local`` in line and return the committed delta.

        Geometry the extractor cannot handle does not block the other facts:
        they are committed first, then ``UnsupportedGeometryError`` is raised
        so the ledger entry records the failure.
        """

        ctx = ReconciliationContext(
            local=local,
            item=RemoteItem(id=None),
            lookup=self._lookup,
            entry=entry,
            policy=self._policy,
        )
        ctx.item = self._resolve_item(ctx)
        entry.item_id = ctx.item.id

        reconcile_inception(ctx)
        reconcile_iucn(ctx)
        reconcile_country(ctx)
        reconcile_operator(ctx, self._operator_id(local))
        reconcile_areas(ctx, has_areas=self._kind.has_areas(local))

        geometry_error: UnsupportedGeometryError | None = None
        if self._evaluate_geometry:
            try:
                geometry = self._extractor.extract(local.geometry)
            except UnsupportedGeometryError as exc:
                geometry_error = exc
            else:
                reconcile_coordinate(ctx, geometry)
                if geometry.needs_document:
                    self._geoshape.sync(ctx, geometry)

        self._commit(ctx)
        if geometry_error is not None:
            raise geometry_error
        return ctx.delta

    def _operator_id(self, local: LocalObject) -> str | None:
        name = local.attribute("FORVALTARE")
        return self._lookup.operators.get(name) if name else None

    def _resolve_item(self, ctx: ReconciliationContext) -> RemoteItem:
        key = ctx.local.key
        item_id = self._facts.find_item(key)
        if item_id is not None:
            log.debug("%s: described by %s", key, item_id)
            return self._facts.get_item(item_id)

        log.debug("%s: no item yet, creating one", key)
        item = self._facts.create_item(self._draft(ctx), summary=CREATE_SUMMARY)
        if item.id is not None:
            ctx.entry.created_item = True
            log.info("%s: created item %s", key, item.id)
        return item

    def _draft(self, ctx: ReconciliationContext) -> ItemDraft:
        local = ctx.local
        languages = self._kind.languages
        return ItemDraft(
            claims=(
                ctx.build_claim("instance of", EntityIdValue(self._kind.type_entity)),
                ctx.build_claim("nvrid", StringValue(local.key)),
            ),
            labels=dict.fromkeys(languages, local.name),
            descriptions={language: self._kind.describe(local, language) for language in languages},
        )

    def _commit(self, ctx: ReconciliationContext) -> None:
        delta = ctx.delta
        key = ctx.local.key
        if delta.is_empty():
            log.debug("%s: no delta", key)
            return
        for claim in delta.to_add:
            log.debug("%s: + %s", key, claim)
        for claim in delta.to_delete:
            log.debug("%s: - %s", key, claim)
        if ctx.item.id is None:
            log.info("%s: %d changes against unsaved draft item, not committed", key, len(delta))
            return
        self._facts.commit_delta(
            ctx.item.id,
            to_add=delta.to_add,
            to_delete=delta.to_delete,
            summary=COMMIT_SUMMARY,
        )
        log.info(
            "%s: committed %d additions and %d deletions to %s",
            key,
            len(delta.to_add),
            len(delta.to_delete),
            ctx.item.id,
        )
