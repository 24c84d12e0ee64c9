"""Claims as they exist on a remote item.

Claims are immutable. Changing one means deleting the old claim (identified by
``claim_id``) and adding a new claim without an id.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from .values import Value


class SnakType(StrEnum):
    VALUE = "value"
    NO_VALUE = "novalue"
    SOME_VALUE = "somevalue"


class Rank(StrEnum):
    PREFERRED = "preferred"
    NORMAL = "normal"
    DEPRECATED = "deprecated"


@dataclass(frozen=True, slots=True)
class Snak:
    property: str
    value: Value | None = None
    snak_type: SnakType = SnakType.VALUE

    @classmethod
    def no_value(cls, property_id: str) -> Snak:
        return cls(property=property_id, value=None, snak_type=SnakType.NO_VALUE)


@dataclass(frozen=True, slots=True)
class Reference:
    """Ordered provenance assertions backing a claim."""

    snaks: tuple[Snak, ...] = ()

    def values(self, property_id: str) -> Iterator[Value]:
        for snak in self.snaks:
            if snak.property == property_id and snak.value is not None:
                yield snak.value


@dataclass(frozen=True, slots=True, kw_only=True)
class Claim:
    mainsnak: Snak
    qualifiers: tuple[Snak, ...] = ()
    references: tuple[Reference, ...] = ()
    rank: Rank = Rank.NORMAL
    claim_id: str | None = None

    @property
    def property_id(self) -> str:
        return self.mainsnak.property

    @property
    def value(self) -> Value | None:
        return self.mainsnak.value

    @property
    def is_no_value(self) -> bool:
        return self.mainsnak.snak_type is SnakType.NO_VALUE

    def qualifier_values(self, property_id: str) -> tuple[Value, ...]:
        return tuple(
            snak.value
            for snak in self.qualifiers
            if snak.property == property_id and snak.value is not None
        )

    def has_qualifier(self, property_id: str) -> bool:
        return any(snak.property == property_id for snak in self.qualifiers)

    def with_qualifier(self, snak: Snak) -> Claim:
        """Return an unsaved copy carrying one more qualifier."""

        return replace(self, qualifiers=(*self.qualifiers, snak), claim_id=None)


@dataclass(slots=True, kw_only=True)
class RemoteItem:
    """The remote representation of one object, grouped by property."""

    id: str | None
    claims: Mapping[str, tuple[Claim, ...]] = field(default_factory=dict)
    labels: Mapping[str, str] = field(default_factory=dict)
    descriptions: Mapping[str, str] = field(default_factory=dict)

    def claims_for(self, property_id: str) -> tuple[Claim, ...]:
        return tuple(self.claims.get(property_id, ()))

    @property
    def is_draft(self) -> bool:
        return self.id is None
