"""Immutable registry of the properties and entities reconciliation refers to."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

PROPERTIES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "instance of": "P31",
        "inception": "P571",
        "IUCN protected areas category": "P814",
        "country": "P17",
        "located in the administrative territorial entity": "P131",
        "coordinate location": "P625",
        "geoshape": "P3896",
        "operator": "P137",
        "area": "P2046",
        "applies to part": "P518",
        "nvrid": "P3613",
        "wdpaid": "P809",
        "reference URL": "P854",
        "stated in": "P248",
        "retrieved": "P813",
        "point in time": "P585",
        "publication date": "P577",
    }
)

ENTITIES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "Sweden": "Q34",
        "hectare": "Q35852",
        "forest": "Q4421",
        "land": "Q11081619",
        "body of water": "Q15324",
        "nature reserves register": "Q29580583",
    }
)

# Category "0" means the object has no IUCN category at all.
IUCN_NOT_APPLICABLE: Final[str] = "0"

IUCN_CATEGORIES: Final[Mapping[str, str | None]] = MappingProxyType(
    {
        IUCN_NOT_APPLICABLE: None,
        "IA": "Q14545608",
        "IB": "Q14545620",
        "II": "Q14545628",
        "III": "Q14545633",
        "IV": "Q14545639",
        "V": "Q14545646",
    }
)


@dataclass(frozen=True, slots=True)
class LookupContext:
    """Named ids resolved once at batch start and passed by reference.

    ``operators`` maps an operator name as written in the dataset to its item
    id. Names missing from the reference tables are resolved by unique label
    once at batch start by ``ReconciliationOrchestrator.resolve_operators``,
    which returns a new context carrying them.
    """

    properties: Mapping[str, str] = field(default_factory=lambda: PROPERTIES)
    entities: Mapping[str, str] = field(default_factory=lambda: ENTITIES)
    iucn_categories: Mapping[str, str | None] = field(default_factory=lambda: IUCN_CATEGORIES)
    operators: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def property(self, name: str) -> str:
        try:
            return self.properties[name]
        except KeyError as exc:
            raise KeyError(f"Unknown property name: {name}") from exc

    def entity(self, name: str) -> str:
        try:
            return self.entities[name]
        except KeyError as exc:
            raise KeyError(f"Unknown entity name: {name}") from exc

    def with_operators(self, operators: Mapping[str, str]) -> LookupContext:
        return replace(self, operators=MappingProxyType(dict(operators)))

    def all_ids(self) -> tuple[str, ...]:
        """Every id this context names, for startup verification."""

        categories = (qid for qid in self.iucn_categories.values() if qid is not None)
        return (*self.properties.values(), *self.entities.values(), *categories)
