"""Batch run defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from .env import env_positive_int

# Entries started before this instant are processed again; later ones are skipped.
DEFAULT_REPROCESS_BEFORE: Final[datetime] = datetime.fromtimestamp(1587918274.951, tz=UTC)
DEFAULT_RETAINED_GENERATIONS: Final[int] = 10


@dataclass(frozen=True, slots=True)
class SyncConfig:
    reprocess_before: datetime = DEFAULT_REPROCESS_BEFORE
    retained_generations: int = DEFAULT_RETAINED_GENERATIONS


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        retained_generations=env_positive_int(
            "NVRSYNC_RETAINED_GENERATIONS", DEFAULT_RETAINED_GENERATIONS
        )
    )
