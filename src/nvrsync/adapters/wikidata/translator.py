"""Translate between Wikibase JSON and the domain claim model."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Final

from nvrsync.domain.model import (
    Claim,
    EntityIdValue,
    GlobeCoordinateValue,
    QuantityValue,
    Rank,
    Reference,
    RemoteItem,
    Snak,
    SnakType,
    StringValue,
    TimePrecision,
    TimeValue,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from nvrsync.domain.model import Value
    from nvrsync.domain.ports import ItemDraft

    from .schema import WikibaseEntity, WikibaseReference, WikibaseSnak, WikibaseStatement

ENTITY_URI: Final[str] = "http://www.wikidata.org/entity/"
UNITLESS: Final[str] = "1"

_TIME = re.compile(r"^([+-]\d+)-(\d{2})-(\d{2})T(\d{2}:\d{2}:\d{2})Z$")


class WikibaseTranslationError(ValueError):
    """Raised when a datavalue cannot be represented in the domain model."""


def _strip_entity_uri(value: str) -> str:
    return value.removeprefix(ENTITY_URI)


def _value_from_wire(datavalue_type: str, raw: Any) -> Value | None:
    match datavalue_type:
        case "wikibase-entityid":
            return EntityIdValue(id=str(raw["id"]))
        case "string":
            return StringValue(value=str(raw))
        case "quantity":
            unit = str(raw.get("unit", UNITLESS))
            return QuantityValue(
                amount=Decimal(str(raw["amount"])),
                unit=None if unit == UNITLESS else _strip_entity_uri(unit),
            )
        case "time":
            parsed = _TIME.match(str(raw["time"]))
            if parsed is None:
                raise WikibaseTranslationError(f"Unparsable time value: {raw['time']!r}")
            year, month, day = (int(group) for group in parsed.groups()[:3])
            return TimeValue(
                year=year,
                month=month,
                day=day,
                precision=TimePrecision(int(raw.get("precision", TimePrecision.DAY))),
                calendar=_strip_entity_uri(str(raw.get("calendarmodel", "Q1985727"))),
                time_of_day=parsed.group(4),
            )
        case "globecoordinate":
            return GlobeCoordinateValue(
                latitude=float(raw["latitude"]),
                longitude=float(raw["longitude"]),
                precision=float(raw.get("precision") or 0.0001),
                globe=_strip_entity_uri(str(raw.get("globe", "Q2"))),
            )
        case _:
            # Value kinds this bot never writes, e.g. monolingual text.
            return None


def snak_from_wire(snak: WikibaseSnak) -> Snak:
    snak_type = SnakType(snak.snaktype)
    value = None
    if snak_type is SnakType.VALUE and snak.datavalue is not None:
        value = _value_from_wire(snak.datavalue.type, snak.datavalue.value)
    return Snak(property=snak.property, value=value, snak_type=snak_type)


def _ordered_snaks(
    snaks: Mapping[str, list[WikibaseSnak]], order: Iterable[str]
) -> tuple[Snak, ...]:
    properties = [*order, *(prop for prop in snaks if prop not in order)]
    return tuple(snak_from_wire(snak) for prop in properties for snak in snaks.get(prop, ()))


def reference_from_wire(reference: WikibaseReference) -> Reference:
    return Reference(snaks=_ordered_snaks(reference.snaks, reference.snaks_order))


def claim_from_wire(statement: WikibaseStatement) -> Claim:
    return Claim(
        mainsnak=snak_from_wire(statement.mainsnak),
        qualifiers=_ordered_snaks(statement.qualifiers, statement.qualifiers_order),
        references=tuple(reference_from_wire(reference) for reference in statement.references),
        rank=Rank(statement.rank),
        claim_id=statement.id,
    )


def item_from_wire(entity: WikibaseEntity) -> RemoteItem:
    return RemoteItem(
        id=entity.id,
        claims={
            prop: tuple(claim_from_wire(statement) for statement in statements)
            for prop, statements in entity.claims.items()
        },
        labels={language: term.value for language, term in entity.labels.items()},
        descriptions={language: term.value for language, term in entity.descriptions.items()},
    )


def _format_amount(amount: Decimal) -> str:
    text = format(amount, "f")
    return text if text.startswith("-") else f"+{text}"


def _format_time(value: TimeValue) -> str:
    sign = "-" if value.year < 0 else "+"
    return (
        f"{sign}{abs(value.year):04d}-{value.month:02d}-{value.day:02d}T{value.time_of_day}Z"
    )


def _value_to_wire(value: Value) -> dict[str, Any]:
    match value:
        case EntityIdValue(id=entity_id):
            entity_type = "property" if entity_id.startswith("P") else "item"
            return {
                "type": "wikibase-entityid",
                "value": {"entity-type": entity_type, "id": entity_id},
            }
        case StringValue(value=text):
            return {"type": "string", "value": text}
        case QuantityValue(amount=amount, unit=unit):
            return {
                "type": "quantity",
                "value": {
                    "amount": _format_amount(amount),
                    "unit": UNITLESS if unit is None else ENTITY_URI + unit,
                },
            }
        case TimeValue():
            return {
                "type": "time",
                "value": {
                    "time": _format_time(value),
                    "timezone": 0,
                    "before": 0,
                    "after": 0,
                    "precision": int(value.precision),
                    "calendarmodel": ENTITY_URI + value.calendar,
                },
            }
        case GlobeCoordinateValue():
            return {
                "type": "globecoordinate",
                "value": {
                    "latitude": value.latitude,
                    "longitude": value.longitude,
                    "altitude": None,
                    "precision": value.precision,
                    "globe": ENTITY_URI + value.globe,
                },
            }


def snak_to_wire(snak: Snak) -> dict[str, Any]:
    """Wire form of a snak. The datatype is omitted, the API derives it from the property."""

    wire: dict[str, Any] = {"snaktype": str(snak.snak_type), "property": snak.property}
    if snak.value is not None:
        wire["datavalue"] = _value_to_wire(snak.value)
    return wire


def _snaks_to_wire(snaks: Iterable[Snak]) -> tuple[dict[str, list[dict[str, Any]]], list[str]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for snak in snaks:
        grouped.setdefault(snak.property, []).append(snak_to_wire(snak))
    return grouped, list(grouped)


def claim_to_wire(claim: Claim) -> dict[str, Any]:
    qualifiers, qualifiers_order = _snaks_to_wire(claim.qualifiers)
    references = []
    for reference in claim.references:
        snaks, snaks_order = _snaks_to_wire(reference.snaks)
        references.append({"snaks": snaks, "snaks-order": snaks_order})
    wire: dict[str, Any] = {
        "type": "statement",
        "rank": str(claim.rank),
        "mainsnak": snak_to_wire(claim.mainsnak),
        "references": references,
    }
    if qualifiers:
        wire["qualifiers"] = qualifiers
        wire["qualifiers-order"] = qualifiers_order
    return wire


def removal_to_wire(claim: Claim) -> dict[str, str]:
    if claim.claim_id is None:
        raise WikibaseTranslationError("Cannot remove a claim without id")
    return {"id": claim.claim_id, "remove": ""}


def draft_to_wire(draft: ItemDraft) -> dict[str, Any]:
    claims: dict[str, list[dict[str, Any]]] = {}
    for claim in draft.claims:
        claims.setdefault(claim.property_id, []).append(claim_to_wire(claim))
    return {
        "labels": {lang: {"language": lang, "value": text} for lang, text in draft.labels.items()},
        "descriptions": {
            lang: {"language": lang, "value": text} for lang, text in draft.descriptions.items()
        },
        "claims": claims,
    }
