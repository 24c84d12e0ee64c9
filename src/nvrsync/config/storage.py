"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_DATA_DIR: Final[str] = "data"
PROGRESS_DIR_NAME: Final[str] = "progress"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
OPERATORS_FILENAME: Final[str] = "forvaltare.json"
MUNICIPALITIES_FILENAME: Final[str] = "municipalities.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Locations of the dataset snapshot, reference tables and progress ledgers.

    The layout mirrors the directory the dataset is unpacked into: feature
    collections live under ``4326/`` (the EPSG code of their projection), the
    reference tables next to it and ledgers under ``progress/``.
    """

    data_dir: Path
    progress_dir_name: str = PROGRESS_DIR_NAME
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def dataset_path(self, relative: str) -> Path:
        return self.resolve_data_dir() / relative

    def progress_dir(self, *, ensure: bool = True) -> Path:
        path = self.resolve_data_dir() / self.progress_dir_name
        if ensure:
            path.mkdir(parents=True, exist_ok=True)
        return path

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.resolve_data_dir()
        if ensure:
            base.mkdir(parents=True, exist_ok=True)
        return base / self.http_cache_filename

    def operators_path(self) -> Path:
        return self.resolve_data_dir() / OPERATORS_FILENAME

    def municipalities_path(self) -> Path:
        return self.resolve_data_dir() / MUNICIPALITIES_FILENAME


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("NVRSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else Path(DEFAULT_DATA_DIR)
    return StorageConfig(data_dir=data_dir)
