"""Read dataset snapshot files into local objects."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from nvrsync.domain.model import LocalObject, geometry_from_geojson

from .schema import GeoJsonFeature, GeoJsonFeatureCollection

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from datetime import date
    from pathlib import Path

log = getLogger(__name__)

ACTIVE_STATUS: Final[str] = "Gällande"
STATUS_ATTRIBUTE: Final[str] = "BESLSTATUS"
KEY_ATTRIBUTE: Final[str] = "NVRID"
NAME_ATTRIBUTE: Final[str] = "NAMN"


def load_feature_collection(path: Path) -> GeoJsonFeatureCollection:
    log.info("Loading features from %s", path)
    return GeoJsonFeatureCollection.model_validate_json(path.read_bytes())


def _is_active(properties: dict[str, Any]) -> bool:
    status = properties.get(STATUS_ATTRIBUTE)
    return isinstance(status, str) and status.casefold() == ACTIVE_STATUS.casefold()


class GeoJsonDatasetReader:
    """Yield the active objects of one or more feature collections, file after file."""

    def __init__(self, paths: Sequence[Path], *, published: date, retrieved: date) -> None:
        self._paths = tuple(paths)
        self._published = published
        self._retrieved = retrieved

    def iter_objects(self) -> Iterator[LocalObject]:
        for path in self._paths:
            collection = load_feature_collection(path)
            log.info("%s: %d features", path.name, len(collection.features))
            for feature in collection.features:
                local = self.to_local_object(feature)
                if local is not None:
                    yield local

    def to_local_object(self, feature: GeoJsonFeature) -> LocalObject | None:
        properties = feature.non_null_properties()
        if not _is_active(properties):
            log.warning(
                "Status of %s is %r, not active, skipping entry",
                properties.get(KEY_ATTRIBUTE),
                properties.get(STATUS_ATTRIBUTE),
            )
            return None

        key = properties.get(KEY_ATTRIBUTE)
        if key is None:
            log.error("NVRID missing in %s", feature.model_dump_json())
            return None
        key = str(key)

        document = feature.model_dump(mode="json")
        document["properties"] = properties
        return LocalObject(
            key=key,
            name=str(properties.get(NAME_ATTRIBUTE) or key),
            published=self._published,
            retrieved=self._retrieved,
            geometry=geometry_from_geojson(feature.geometry),
            attributes=properties,
            feature=document,
        )
