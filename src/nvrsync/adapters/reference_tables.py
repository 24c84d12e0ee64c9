"""Static operator and municipality tables mapping Swedish names to item ids."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, TypeAdapter

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = getLogger(__name__)


class ReferenceRow(BaseModel):
    sv: str
    item: str


_ROWS = TypeAdapter(list[ReferenceRow])


def load_reference_table(path: Path) -> dict[str, str]:
    rows = _ROWS.validate_json(path.read_bytes())
    return {row.sv: row.item for row in rows}


def load_operator_table(paths: Iterable[Path]) -> dict[str, str]:
    """Merge the tables in order; later tables win on duplicate names. Missing files are skipped."""

    operators: dict[str, str] = {}
    for path in paths:
        if not path.exists():
            log.warning("Reference table %s does not exist, skipping", path)
            continue
        table = load_reference_table(path)
        log.info("Loaded %d names from %s", len(table), path)
        operators.update(table)
    return operators
