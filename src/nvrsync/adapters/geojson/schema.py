"""Feature-collection schema for the dataset snapshot files."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)


class GeoJsonBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
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
            "GeoJSON %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class GeoJsonFeature(GeoJsonBaseModel):
    type: str = "Feature"
    properties: dict[str, Any] | None = None
    geometry: dict[str, Any] | None = None

    def non_null_properties(self) -> dict[str, Any]:
        return {key: value for key, value in (self.properties or {}).items() if value is not None}


class GeoJsonFeatureCollection(GeoJsonBaseModel):
    type: str = "FeatureCollection"
    features: list[GeoJsonFeature] = Field(default_factory=list)
