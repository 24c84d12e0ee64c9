"""Coordinate location fact derived from the geometry."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from nvrsync.domain.geometry import great_circle_km
from nvrsync.domain.model import GlobeCoordinateValue

if TYPE_CHECKING:
    from nvrsync.domain.geometry import GeometryFacts

    from .context import ReconciliationContext

log = getLogger(__name__)

LABEL = "coordinate"


def reconcile_coordinate(ctx: ReconciliationContext, facts: GeometryFacts) -> None:
    local = GlobeCoordinateValue(latitude=facts.latitude, longitude=facts.longitude)
    existing = ctx.most_recent("coordinate location")
    if existing is None:
        ctx.add(ctx.build_claim("coordinate location", local), LABEL)
        return
    if not ctx.may_supersede(existing, LABEL):
        return

    remote = existing.value
    if not isinstance(remote, GlobeCoordinateValue):
        log.debug("%s: existing coordinate has no value, replacing", ctx.local.key)
        ctx.replace(existing, ctx.build_claim("coordinate location", local), LABEL)
        return

    distance_km = great_circle_km(remote.latitude, remote.longitude, local.latitude, local.longitude)
    if distance_km < facts.tolerance_km:
        log.debug(
            "%s: local coordinate only %.1f m from remote, keeping", ctx.local.key, distance_km * 1000
        )
        return
    log.debug("%s: local coordinate %.1f m from remote, replacing", ctx.local.key, distance_km * 1000)
    ctx.replace(existing, ctx.build_claim("coordinate location", local), LABEL)
