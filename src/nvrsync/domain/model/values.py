"""Typed values carried by claim snaks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, UTC, date, datetime
from decimal import Decimal
from enum import IntEnum

EARTH = "Q2"


class TimePrecision(IntEnum):
    """Wikibase time precisions, from a billion years (0) down to a second (14)."""

    BILLION_YEARS = 0
    HUNDRED_MILLION_YEARS = 1
    TEN_MILLION_YEARS = 2
    MILLION_YEARS = 3
    HUNDRED_THOUSAND_YEARS = 4
    TEN_THOUSAND_YEARS = 5
    MILLENNIUM = 6
    CENTURY = 7
    DECADE = 8
    YEAR = 9
    MONTH = 10
    DAY = 11
    HOUR = 12
    MINUTE = 13
    SECOND = 14


@dataclass(frozen=True, slots=True)
class EntityIdValue:
    id: str


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str


@dataclass(frozen=True, slots=True)
class QuantityValue:
    """Decimal amount with an optional unit entity (``None`` means unitless)."""

    amount: Decimal
    unit: str | None = None


@dataclass(frozen=True, slots=True)
class TimeValue:
    year: int
    month: int = 0
    day: int = 0
    precision: TimePrecision = TimePrecision.DAY
    calendar: str = "Q1985727"
    time_of_day: str = "00:00:00"

    @classmethod
    def from_date(cls, value: date) -> TimeValue:
        return cls(year=value.year, month=value.month, day=value.day)

    def to_datetime(self) -> datetime:
        # Deep-time and far-future values are clamped to the range datetime can hold.
        year = min(max(self.year, MINYEAR), MAXYEAR)
        return datetime(year, max(self.month, 1), max(self.day, 1), tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class GlobeCoordinateValue:
    latitude: float
    longitude: float
    precision: float = 0.0001
    globe: str = EARTH


type Value = EntityIdValue | StringValue | QuantityValue | TimeValue | GlobeCoordinateValue
