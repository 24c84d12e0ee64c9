"""Domain model for protected-area reconciliation."""

from __future__ import annotations

from .claims import Claim, Rank, Reference, RemoteItem, Snak, SnakType
from .geometry import (
    Geometry,
    MultiPointGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
    Position,
    UnsupportedGeometry,
    geometry_from_geojson,
)
from .local_object import LocalObject
from .values import (
    EntityIdValue,
    GlobeCoordinateValue,
    QuantityValue,
    StringValue,
    TimePrecision,
    TimeValue,
    Value,
)

__all__ = [
    "Claim",
    "EntityIdValue",
    "Geometry",
    "GlobeCoordinateValue",
    "LocalObject",
    "MultiPointGeometry",
    "MultiPolygonGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "Position",
    "QuantityValue",
    "Rank",
    "Reference",
    "RemoteItem",
    "Snak",
    "SnakType",
    "StringValue",
    "TimePrecision",
    "TimeValue",
    "UnsupportedGeometry",
    "Value",
    "geometry_from_geojson",
]
