"""The locally observed dataset record for one protected-area object."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date

    from .geometry import Geometry


@dataclass(frozen=True, slots=True, kw_only=True)
class LocalObject:
    key: str
    name: str
    published: date
    retrieved: date
    geometry: Geometry
    attributes: Mapping[str, Any] = field(default_factory=dict)
    feature: Mapping[str, Any] = field(default_factory=dict)

    def attribute(self, name: str) -> str | None:
        """Return the attribute as trimmed text, ``None`` when absent or blank."""

        raw = self.attributes.get(name)
        if raw is None:
            return None
        text = str(raw).strip()
        return text or None

    def decimal_attribute(self, name: str) -> Decimal | None:
        raw = self.attributes.get(name)
        if raw is None:
            return None
        try:
            # str() first so floats keep their shortest repr instead of binary noise.
            return Decimal(str(raw))
        except InvalidOperation as exc:
            raise ValueError(f"Attribute {name} is not numeric: {raw!r}") from exc
