"""Wikibase JSON and SPARQL result schemas."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

type EntityId = str  # Q- or P-prefixed


class WikibaseBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Wikibase %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class WikibaseDataValue(WikibaseBaseModel):
    type: str
    value: Any


class WikibaseSnak(WikibaseBaseModel):
    snaktype: str
    property: EntityId
    datavalue: WikibaseDataValue | None = None
    datatype: str | None = None
    hash: str | None = None


class WikibaseReference(WikibaseBaseModel):
    hash: str | None = None
    snaks: dict[EntityId, list[WikibaseSnak]] = Field(default_factory=dict)
    snaks_order: list[EntityId] = Field(default_factory=list, alias="snaks-order")


class WikibaseStatement(WikibaseBaseModel):
    id: str | None = None
    type: str = "statement"
    rank: str = "normal"
    mainsnak: WikibaseSnak
    qualifiers: dict[EntityId, list[WikibaseSnak]] = Field(default_factory=dict)
    qualifiers_order: list[EntityId] = Field(default_factory=list, alias="qualifiers-order")
    references: list[WikibaseReference] = Field(default_factory=list)


class WikibaseTerm(WikibaseBaseModel):
    language: str
    value: str


class WikibaseEntity(WikibaseBaseModel):
    id: EntityId
    type: str | None = None
    labels: dict[str, WikibaseTerm] = Field(default_factory=dict)
    descriptions: dict[str, WikibaseTerm] = Field(default_factory=dict)
    claims: dict[EntityId, list[WikibaseStatement]] = Field(default_factory=dict)
    missing: str | bool | None = None
    lastrevid: int | None = None

    @property
    def exists(self) -> bool:
        return self.missing is None or self.missing is False


class WbGetEntitiesResponse(WikibaseBaseModel):
    entities: dict[str, WikibaseEntity] = Field(default_factory=dict)
    success: int | None = None


class WbEditEntityResponse(WikibaseBaseModel):
    entity: WikibaseEntity
    success: int | None = None


class SparqlBinding(WikibaseBaseModel):
    type: str
    value: str


class SparqlResults(WikibaseBaseModel):
    bindings: list[dict[str, SparqlBinding]] = Field(default_factory=list)


class SparqlResponse(WikibaseBaseModel):
    head: dict[str, Any] = Field(default_factory=dict)
    results: SparqlResults = Field(default_factory=SparqlResults)
