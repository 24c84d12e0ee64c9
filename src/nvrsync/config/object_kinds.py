"""Registry of the protected-area object kinds the bot knows how to sync."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import UnknownObjectKindError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from nvrsync.domain.model import LocalObject

METADATA_URL = "https://metadatakatalogen.naturvardsverket.se/metadatakatalogen/GetMetaDataById?id={}"
SANDBOX_TITLE_PREFIX = "Sandbox/KarlWettin-WMSE"

_PUNCTUATION = re.compile(r"""[!"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~]""")

type DescriptionTemplate = Callable[[LocalObject], str]


def normalize_title_segment(value: str) -> str:
    """Replace ASCII punctuation so the name is safe inside a page title."""

    return _PUNCTUATION.sub("_", value.strip())


def county_name(local: LocalObject) -> str:
    county = local.attribute("LAN") or ""
    return county.replace("Län", "län", 1)


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectKind:
    slug: str
    label: str
    type_entity: str
    metadata_id: str
    dataset_files: tuple[str, ...]
    title_folder: str
    categories: tuple[str, ...]
    descriptions: Mapping[str, DescriptionTemplate] = field(default_factory=dict)
    normalize_title_names: bool = False
    areas_for_points: bool = True
    name_categories: bool = False

    @property
    def source_url(self) -> str:
        return METADATA_URL.format(self.metadata_id)

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self.descriptions)

    def describe(self, local: LocalObject, language: str) -> str:
        try:
            template = self.descriptions[language]
        except KeyError as exc:
            raise ValueError(f"Unsupported language: {language}") from exc
        return template(local)

    def has_areas(self, local: LocalObject) -> bool:
        if self.areas_for_points:
            return True
        return local.geometry.has_area

    def category_tags(self, local: LocalObject) -> tuple[str, ...]:
        if self.name_categories:
            return tuple(f"{category}|{local.name}" for category in self.categories)
        return self.categories

    def document_title(self, local: LocalObject, *, sandbox: bool = False) -> str:
        name = normalize_title_segment(local.name) if self.normalize_title_names else local.name
        prefix = SANDBOX_TITLE_PREFIX if sandbox else ""
        return (
            f"Data:{prefix}/Sweden/{self.title_folder}"
            f"/{local.published.year}/{name}/{local.key}.map"
        )


NATURE_RESERVES = ObjectKind(
    slug="nature-reserves",
    label="NatureReserve",
    type_entity="Q179049",
    metadata_id="2921b01a-0baf-4702-a89f-9c5626c97844",
    dataset_files=("4326/naturreservat.geojson",),
    title_folder="Nature reserves",
    categories=(
        "Map data of Sweden",
        "Map data of protected areas of Sweden",
        "Map data of nature reserves of Sweden",
    ),
    descriptions={
        "sv": lambda local: f"naturreservat i {county_name(local)}",
        "en": lambda local: f"nature reserve in {county_name(local)}, Sweden",
    },
)

NATIONAL_PARKS = ObjectKind(
    slug="national-parks",
    label="NationalPark",
    type_entity="Q46169",
    metadata_id="bfc33845-ffb9-4835-8355-76af3773d4e0",
    dataset_files=("4326/nationalparker.geojson",),
    title_folder="National parks",
    categories=(
        "Map data of Sweden",
        "Map data of protected areas of Sweden",
        "Map data of national parks of Sweden",
    ),
    descriptions={
        "sv": lambda local: f"nationalpark i {county_name(local)}",
        "en": lambda local: f"national park in {county_name(local)}, Sweden",
    },
)

NATURAL_MONUMENTS = ObjectKind(
    slug="natural-monuments",
    label="NaturalMonument",
    type_entity="Q23790",
    metadata_id="c6b02e88-8084-4b3f-8a7d-33e5d45349c4",
    dataset_files=("4326/naturminne_polygon.geojson", "4326/naturminne_punkt.geojson"),
    title_folder="Natural monuments",
    categories=("Map data of natural monuments of Sweden",),
    descriptions={
        "sv": lambda local: f"naturminne med NVRID {local.key} i {county_name(local)}",
        "en": lambda local: (
            f"natural monument with NVRID {local.key} in {county_name(local)}, Sweden"
        ),
    },
    normalize_title_names=True,
    areas_for_points=False,
    name_categories=True,
)

OBJECT_KINDS: dict[str, ObjectKind] = {
    kind.slug: kind for kind in (NATURE_RESERVES, NATIONAL_PARKS, NATURAL_MONUMENTS)
}


def get_object_kind(slug: str) -> ObjectKind:
    try:
        return OBJECT_KINDS[slug]
    except KeyError as exc:
        known = ", ".join(sorted(OBJECT_KINDS))
        raise UnknownObjectKindError(f"Unknown object kind {slug!r} (known: {known})") from exc
