"""Geometry-derived facts: representative coordinate and map zoom level."""

from __future__ import annotations

import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

import shapely
from shapely.geometry import Point, shape

from .errors import GeometryInvariantError, UnsupportedGeometryError
from .model import (
    MultiPointGeometry,
    MultiPolygonGeometry,
    PointGeometry,
    PolygonGeometry,
    UnsupportedGeometry,
)

if TYPE_CHECKING:
    from shapely.geometry.base import BaseGeometry

    from .model import Geometry

log = getLogger(__name__)

EARTH_RADIUS_KM: Final[float] = 6371.0
POINT_TOLERANCE_KM: Final[float] = 0.001
AREA_TOLERANCE_KM: Final[float] = 0.1

# (exclusive upper bound of the bounding box diagonal in km, zoom level)
ZOOM_STEPS: Final[tuple[tuple[float, int], ...]] = (
    (1.0, 13),
    (4.0, 12),
    (16.0, 11),
    (64.0, 10),
    (256.0, 9),
    (1024.0, 8),
)
FLOOR_ZOOM: Final[int] = 7


@dataclass(frozen=True, slots=True)
class GeometryFacts:
    """What the geometry contributes to an item.

    ``zoom`` is set only for areal geometries, which are also the only ones
    that get a shape document.
    """

    latitude: float
    longitude: float
    tolerance_km: float
    zoom: int | None = None

    @property
    def needs_document(self) -> bool:
        return self.zoom is not None


def great_circle_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, a)))


def zoom_for_diagonal(diagonal_km: float) -> int:
    for upper_bound, zoom in ZOOM_STEPS:
        if diagonal_km < upper_bound:
            return zoom
    log.warning("Area too large for a good zoom value (%.1f km diagonal)", diagonal_km)
    return FLOOR_ZOOM


def bounding_box_diagonal_km(geometry: BaseGeometry) -> float:
    min_lon, min_lat, max_lon, max_lat = geometry.bounds
    return great_circle_km(min_lat, min_lon, max_lat, max_lon)


def contained_centroid(geometry: BaseGeometry) -> Point:
    """Return the centroid, or the vertex closest to it when the centroid falls outside.

    Raises ``GeometryInvariantError`` when neither lies within or on the geometry.
    """

    centroid = geometry.centroid
    if geometry.intersects(centroid):
        return centroid

    vertices = shapely.get_coordinates(geometry)
    if len(vertices) == 0:
        raise GeometryInvariantError("Geometry has no vertices to fall back on")
    closest = min(
        (Point(x, y) for x, y in vertices),
        key=centroid.distance,
    )
    if not geometry.intersects(closest):
        raise GeometryInvariantError("Unable to find a representative point inside the geometry")
    log.debug("Centroid outside geometry, using closest vertex %s", closest.wkt)
    return closest


class GeometryExtractor:
    """Compute representative point, tolerance and zoom for a tagged geometry."""

    def extract(self, geometry: Geometry) -> GeometryFacts:
        match geometry:
            case PointGeometry(position=(longitude, latitude)):
                return GeometryFacts(
                    latitude=latitude, longitude=longitude, tolerance_km=POINT_TOLERANCE_KM
                )
            case MultiPointGeometry():
                centroid = shape(geometry).centroid
                return GeometryFacts(
                    latitude=centroid.y, longitude=centroid.x, tolerance_km=POINT_TOLERANCE_KM
                )
            case PolygonGeometry() | MultiPolygonGeometry():
                areal = shape(geometry)
                point = contained_centroid(areal)
                return GeometryFacts(
                    latitude=point.y,
                    longitude=point.x,
                    tolerance_km=AREA_TOLERANCE_KM,
                    zoom=zoom_for_diagonal(bounding_box_diagonal_km(areal)),
                )
            case UnsupportedGeometry(type_name=type_name):
                raise UnsupportedGeometryError(f"Unsupported geometry type: {type_name}")
