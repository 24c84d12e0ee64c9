"""Lookups over the claims of a remote item."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nvrsync.domain.errors import AmbiguousResultError
from nvrsync.domain.model import Snak, TimeValue

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from nvrsync.domain.model import Claim, Value


def reference_published_date(claim: Claim | None, published_property: str) -> datetime | None:
    """Latest published date found in any of the claim's references."""

    if claim is None:
        return None
    dates = [
        value.to_datetime()
        for reference in claim.references
        for value in reference.values(published_property)
        if isinstance(value, TimeValue)
    ]
    return max(dates, default=None)


def find_most_recent_published(
    claims: Iterable[Claim], published_property: str
) -> Claim | None:
    """The claim whose references carry the latest published date.

    When no claim carries a published date the first claim wins.
    """

    first: Claim | None = None
    best: Claim | None = None
    best_date: datetime | None = None
    for claim in claims:
        if first is None:
            first = claim
        published = reference_published_date(claim, published_property)
        if published is not None and (best_date is None or published > best_date):
            best, best_date = claim, published
    return best if best is not None else first


def find_unique_by_qualifier(
    claims: Iterable[Claim], qualifier_property: str, qualifier_value: Value
) -> Claim | None:
    """The single claim whose qualifiers are exactly ``{qualifier_property: qualifier_value}``."""

    expected = (Snak(property=qualifier_property, value=qualifier_value),)
    matches = [claim for claim in claims if claim.qualifiers == expected]
    if len(matches) > 1:
        raise AmbiguousResultError(
            f"Expected at most one claim qualified by {qualifier_property}={qualifier_value},"
            f" found {len(matches)}"
        )
    return matches[0] if matches else None


def find_unqualified(claims: Iterable[Claim]) -> Claim | None:
    matches = [claim for claim in claims if not claim.qualifiers]
    if len(matches) > 1:
        raise AmbiguousResultError(
            f"Expected at most one unqualified claim, found {len(matches)}"
        )
    return matches[0] if matches else None
