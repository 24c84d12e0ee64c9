"""Tagged union of the geometry kinds a dataset feature may carry.

Positions follow GeoJSON order: ``(longitude, latitude)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

type Position = tuple[float, float]
type Ring = tuple[Position, ...]


@dataclass(frozen=True, slots=True)
class PointGeometry:
    position: Position

    has_area = False

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": self.position}


@dataclass(frozen=True, slots=True)
class MultiPointGeometry:
    positions: tuple[Position, ...]

    has_area = False

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return {"type": "MultiPoint", "coordinates": self.positions}


@dataclass(frozen=True, slots=True)
class PolygonGeometry:
    rings: tuple[Ring, ...]

    has_area = True

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return {"type": "Polygon", "coordinates": self.rings}


@dataclass(frozen=True, slots=True)
class MultiPolygonGeometry:
    polygons: tuple[tuple[Ring, ...], ...]

    has_area = True

    @property
    def __geo_interface__(self) -> dict[str, Any]:
        return {"type": "MultiPolygon", "coordinates": self.polygons}


@dataclass(frozen=True, slots=True)
class UnsupportedGeometry:
    """Lines, multi-lines, geometry collections or a missing geometry."""

    type_name: str

    has_area = False


type Geometry = (
    PointGeometry
    | MultiPointGeometry
    | PolygonGeometry
    | MultiPolygonGeometry
    | UnsupportedGeometry
)


def _position(raw: Any) -> Position:
    return (float(raw[0]), float(raw[1]))


def _ring(raw: Any) -> Ring:
    return tuple(_position(position) for position in raw)


def geometry_from_geojson(raw: Any) -> Geometry:
    """Build the tagged geometry from a GeoJSON geometry object."""

    if not isinstance(raw, dict):
        return UnsupportedGeometry(type_name="null")
    kind = raw.get("type")
    coordinates = raw.get("coordinates")
    match kind:
        case "Point":
            return PointGeometry(position=_position(coordinates))
        case "MultiPoint":
            return MultiPointGeometry(positions=tuple(_position(p) for p in coordinates))
        case "Polygon":
            return PolygonGeometry(rings=tuple(_ring(ring) for ring in coordinates))
        case "MultiPolygon":
            return MultiPolygonGeometry(
                polygons=tuple(tuple(_ring(ring) for ring in polygon) for polygon in coordinates)
            )
        case _:
            return UnsupportedGeometry(type_name=str(kind))
