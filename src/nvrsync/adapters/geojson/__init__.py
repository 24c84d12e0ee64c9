"""Dataset snapshot adapter package."""

from __future__ import annotations

from .reader import GeoJsonDatasetReader, load_feature_collection
from .schema import GeoJsonFeature, GeoJsonFeatureCollection

__all__ = [
    "GeoJsonDatasetReader",
    "GeoJsonFeature",
    "GeoJsonFeatureCollection",
    "load_feature_collection",
]
