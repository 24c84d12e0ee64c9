from __future__ import annotations

from dataclasses import replace
from datetime import UTC, date, datetime

import pytest

from nvrsync.domain.errors import AmbiguousResultError
from nvrsync.domain.model import EntityIdValue, Reference, Snak, StringValue, TimeValue
from nvrsync.domain.reconciliation.statements import (
    find_most_recent_published,
    find_unique_by_qualifier,
    find_unqualified,
    reference_published_date,
)
from tests.support.objects import make_claim

PUBLISHED = "P577"


def test_reference_published_date_takes_latest_reference() -> None:
    claim = make_claim("P17", EntityIdValue("Q34"), published=date(2018, 1, 1))
    claim = replace(
        claim,
        references=(
            *claim.references,
            Reference(snaks=(Snak(PUBLISHED, TimeValue.from_date(date(2019, 6, 1))),)),
            Reference(snaks=(Snak("P854", StringValue("http://example.org")),)),
        ),
    )

    assert reference_published_date(claim, PUBLISHED) == datetime(2019, 6, 1, tzinfo=UTC)


def test_reference_published_date_absent() -> None:
    assert reference_published_date(make_claim("P17", EntityIdValue("Q34")), PUBLISHED) is None
    assert reference_published_date(None, PUBLISHED) is None


def test_most_recent_published_wins() -> None:
    old = make_claim("P137", EntityIdValue("Q1"), claim_id="a", published=date(2018, 1, 1))
    new = make_claim("P137", EntityIdValue("Q2"), claim_id="b", published=date(2019, 1, 1))
    undated = make_claim("P137", EntityIdValue("Q3"), claim_id="c")

    assert find_most_recent_published([undated, old, new], PUBLISHED) is new


def test_most_recent_falls_back_to_first_claim() -> None:
    first = make_claim("P137", EntityIdValue("Q1"), claim_id="a")
    second = make_claim("P137", EntityIdValue("Q2"), claim_id="b")

    assert find_most_recent_published([first, second], PUBLISHED) is first
    assert find_most_recent_published([], PUBLISHED) is None


def test_unique_by_qualifier_requires_exact_qualifiers() -> None:
    forest = Snak("P518", EntityIdValue("Q4421"))
    exact = make_claim("P2046", None, claim_id="a", qualifiers=(forest,))
    extra = make_claim(
        "P2046", None, claim_id="b", qualifiers=(forest, Snak("P585", TimeValue(2019)))
    )

    assert find_unique_by_qualifier([extra, exact], "P518", EntityIdValue("Q4421")) is exact


def test_unique_by_qualifier_rejects_duplicates() -> None:
    forest = Snak("P518", EntityIdValue("Q4421"))
    claims = [
        make_claim("P2046", None, claim_id="a", qualifiers=(forest,)),
        make_claim("P2046", None, claim_id="b", qualifiers=(forest,)),
    ]

    with pytest.raises(AmbiguousResultError):
        find_unique_by_qualifier(claims, "P518", EntityIdValue("Q4421"))


def test_unqualified_claim() -> None:
    total = make_claim("P2046", None, claim_id="a")
    part = make_claim("P2046", None, claim_id="b", qualifiers=(Snak("P518", EntityIdValue("Q4421")),))

    assert find_unqualified([part, total]) is total
    with pytest.raises(AmbiguousResultError):
        find_unqualified([total, total])
