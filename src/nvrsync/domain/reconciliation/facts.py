"""Per-field delta algorithms for the facts an item carries."""

from __future__ import annotations

import re
from datetime import date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from nvrsync.domain.errors import MissingInceptionDateError
from nvrsync.domain.model import EntityIdValue, QuantityValue, Snak, TimeValue

from .statements import find_unique_by_qualifier, find_unqualified

if TYPE_CHECKING:
    from nvrsync.domain.model import Claim, Value

    from .context import ReconciliationContext

log = getLogger(__name__)

DATASET_DATE_FORMATS: Final[tuple[str, ...]] = ("%Y/%m/%d", "%Y-%m-%d")

# Checked in order; the first present attribute wins.
INCEPTION_ATTRIBUTES: Final[tuple[str, ...]] = ("IKRAFTDAT", "URSGALLDAT", "URSBESLDAT")

_IUCN_CODE = re.compile(r"^\s*([^,]+)")

# (ledger label, dataset attribute, applies-to-part entity name or None for the total)
AREA_VARIANTS: Final[tuple[tuple[str, str, str | None], ...]] = (
    ("area", "AREA_HA", None),
    ("area land", "LAND_HA", "land"),
    ("area forest", "SKOG_HA", "forest"),
    ("area water", "VATTEN_HA", "body of water"),
)


def parse_dataset_date(text: str) -> date:
    for fmt in DATASET_DATE_FORMATS:
        try:
            return datetime.strptime(text.strip(), fmt).date()  # noqa: DTZ007
        except ValueError:
            continue
    raise ValueError(f"Unparsable dataset date: {text!r}")


def inception_date(ctx: ReconciliationContext) -> date:
    for attribute in INCEPTION_ATTRIBUTES:
        text = ctx.local.attribute(attribute)
        if text is not None:
            return parse_dataset_date(text)
    raise MissingInceptionDateError(
        f"None of {', '.join(INCEPTION_ATTRIBUTES)} is set for {ctx.local.key}"
    )


def parse_iucn_code(raw: str) -> str:
    """Normalise ``" ii, something"`` to ``"II"``."""

    match = _IUCN_CODE.match(raw)
    return (match.group(1) if match else raw).strip().upper()


def reconcile_scalar(
    ctx: ReconciliationContext, property_name: str, label: str, value: Value
) -> None:
    """Single-valued fact: replace a differing or unreferenced claim."""

    existing = ctx.most_recent(property_name)
    if existing is None:
        ctx.add(ctx.build_claim(property_name, value), label)
        return
    if existing.value != value:
        if ctx.may_supersede(existing, label):
            ctx.replace(existing, ctx.build_claim(property_name, value), label)
        return
    if not existing.references:
        log.debug("%s: %s matches but lacks references, re-adding", ctx.local.key, label)
        ctx.replace(existing, ctx.build_claim(property_name, value), label)


def close_claim(ctx: ReconciliationContext, existing: Claim, label: str) -> None:
    """Stamp ``existing`` with a point-in-time taken from its own reference.

    Claims that already carry a point-in-time are closed already. Claims
    without a reference publication date cannot be dated and are left alone.
    """

    if existing.has_qualifier(ctx.lookup.property("point in time")):
        return
    published = ctx.published(existing)
    if published is None:
        ctx.entry.warn(
            f"No published date to use for point in time. Previous {label} left untouched."
        )
        return
    closed = existing.with_qualifier(ctx.point_in_time(TimeValue.from_date(published.date())))
    ctx.replace(existing, closed, label)


def reconcile_with_history(
    ctx: ReconciliationContext, property_name: str, label: str, value: Value | None
) -> None:
    """Categorical fact whose changes keep the superseded claim as history.

    ``value=None`` is the "not applicable" sentinel and maps to a no-value claim.
    """

    existing = ctx.most_recent(property_name)
    if existing is None:
        ctx.add(ctx.build_claim(property_name, value), label)
        return
    if not ctx.may_supersede(existing, label):
        return
    if value is None and existing.is_no_value:
        return
    if value is not None and existing.value == value:
        return
    close_claim(ctx, existing, label)
    ctx.add(
        ctx.build_claim(property_name, value, qualifiers=(ctx.local_point_in_time(),)),
        label,
    )


def reconcile_inception(ctx: ReconciliationContext) -> None:
    value = TimeValue.from_date(inception_date(ctx))
    reconcile_scalar(ctx, "inception", "inception date", value)


def reconcile_country(ctx: ReconciliationContext) -> None:
    value = EntityIdValue(ctx.lookup.entity("Sweden"))
    reconcile_scalar(ctx, "country", "country", value)


def reconcile_iucn(ctx: ReconciliationContext) -> None:
    raw = ctx.local.attribute("IUCNKAT")
    if raw is None:
        return
    code = parse_iucn_code(raw)
    if code not in ctx.lookup.iucn_categories:
        ctx.entry.warn(f"Unsupported IUCN category in feature: {code}")
        return
    category = ctx.lookup.iucn_categories[code]
    value = EntityIdValue(category) if category is not None else None
    reconcile_with_history(ctx, "IUCN protected areas category", "iucn category", value)


def reconcile_operator(ctx: ReconciliationContext, operator_id: str | None) -> None:
    name = ctx.local.attribute("FORVALTARE")
    if name is None:
        return
    if operator_id is None:
        ctx.entry.warn(
            "Operator claims will not be touched."
            f" Unable to lookup operator listed in feature: {name}"
        )
        return
    reconcile_with_history(ctx, "operator", "operator", EntityIdValue(operator_id))


def find_area_claim(ctx: ReconciliationContext, part: str | None) -> Claim | None:
    claims = ctx.claims("area")
    if part is None:
        return find_unqualified(claims)
    return find_unique_by_qualifier(
        claims,
        ctx.lookup.property("applies to part"),
        EntityIdValue(ctx.lookup.entity(part)),
    )


def reconcile_areas(ctx: ReconciliationContext, *, has_areas: bool) -> None:
    """Total area plus land, forest and water parts, all in hectares."""

    if not has_areas:
        for label, _attribute, part in AREA_VARIANTS:
            existing = find_area_claim(ctx, part)
            if existing is not None:
                ctx.delete(existing, label)
        return

    hectare = ctx.lookup.entity("hectare")
    for label, attribute, part in AREA_VARIANTS:
        amount = ctx.local.decimal_attribute(attribute)
        if amount is None:
            ctx.entry.warn(f"Missing {attribute}, {label} left untouched.")
            continue
        existing = find_area_claim(ctx, part)
        if not ctx.may_supersede(existing, label):
            continue
        value = QuantityValue(amount=amount, unit=hectare)
        qualifiers: tuple[Snak, ...] = ()
        if part is not None:
            qualifiers = (
                Snak(
                    property=ctx.lookup.property("applies to part"),
                    value=EntityIdValue(ctx.lookup.entity(part)),
                ),
            )
        fresh = ctx.build_claim("area", value, qualifiers=qualifiers)
        if existing is None:
            ctx.add(fresh, label)
        elif existing.value != value:
            ctx.replace(existing, fresh, label)
