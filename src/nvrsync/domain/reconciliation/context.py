"""Per-object state shared by the fact reconcilers."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from nvrsync.domain.model import Claim, EntityIdValue, Reference, Snak, StringValue, TimeValue

from .delta import ReconciliationDelta
from .freshness import FreshnessPolicy
from .statements import find_most_recent_published, reference_published_date

if TYPE_CHECKING:
    from datetime import datetime

    from nvrsync.domain.lookup import LookupContext
    from nvrsync.domain.model import LocalObject, RemoteItem, Value
    from nvrsync.domain.progress import LedgerEntry

log = getLogger(__name__)

REGISTER_URL = "http://nvpub.vic-metria.nu/naturvardsregistret/rest/omrade/{key}/{status}"
ACTIVE_STATUS = "Gällande"


def register_url(key: str) -> str:
    return REGISTER_URL.format(key=key, status=quote(ACTIVE_STATUS))


@dataclass(slots=True, kw_only=True)
class ReconciliationContext:
    local: LocalObject
    item: RemoteItem
    lookup: LookupContext
    entry: LedgerEntry
    policy: FreshnessPolicy = field(default_factory=FreshnessPolicy)
    delta: ReconciliationDelta = field(default_factory=ReconciliationDelta)

    def claims(self, property_name: str) -> tuple[Claim, ...]:
        return self.item.claims_for(self.lookup.property(property_name))

    def most_recent(self, property_name: str) -> Claim | None:
        return find_most_recent_published(
            self.claims(property_name), self.lookup.property("publication date")
        )

    def published(self, claim: Claim | None) -> datetime | None:
        return reference_published_date(claim, self.lookup.property("publication date"))

    def may_supersede(self, claim: Claim | None, label: str) -> bool:
        """Check freshness, recording a warning when the remote claim is newer."""

        if self.policy.may_supersede(self.published(claim), self.local.published):
            return True
        log.info("%s: %s published date is fresher remotely, skipping", self.local.key, label)
        self.entry.warn(f"{label} publication date is fresher at Wikidata.")
        return False

    def references(self) -> tuple[Reference, ...]:
        lookup = self.lookup
        return (
            Reference(
                snaks=(
                    Snak(
                        property=lookup.property("reference URL"),
                        value=StringValue(register_url(self.local.key)),
                    ),
                    Snak(
                        property=lookup.property("retrieved"),
                        value=TimeValue.from_date(self.local.retrieved),
                    ),
                    Snak(
                        property=lookup.property("publication date"),
                        value=TimeValue.from_date(self.local.published),
                    ),
                    Snak(
                        property=lookup.property("stated in"),
                        value=EntityIdValue(lookup.entity("nature reserves register")),
                    ),
                )
            ),
        )

    def build_claim(
        self,
        property_name: str,
        value: Value | None,
        *,
        qualifiers: tuple[Snak, ...] = (),
    ) -> Claim:
        """A new claim with fresh provenance; ``value=None`` builds a no-value claim."""

        property_id = self.lookup.property(property_name)
        mainsnak = Snak.no_value(property_id) if value is None else Snak(property_id, value)
        return Claim(mainsnak=mainsnak, qualifiers=qualifiers, references=self.references())

    def point_in_time(self, value: TimeValue) -> Snak:
        return Snak(property=self.lookup.property("point in time"), value=value)

    def local_point_in_time(self) -> Snak:
        return self.point_in_time(TimeValue.from_date(self.local.published))

    def add(self, claim: Claim, label: str) -> None:
        self.delta.add(claim)
        self.entry.created_claims.append(label)

    def delete(self, claim: Claim, label: str) -> None:
        self.delta.delete(claim)
        self.entry.deleted_claims.append(label)

    def replace(self, old: Claim, new: Claim, label: str) -> None:
        self.delta.replace(old, new)
        self.entry.modified_claims.append(label)
