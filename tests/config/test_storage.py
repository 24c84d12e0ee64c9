from __future__ import annotations

from pathlib import Path

import pytest

from nvrsync.config import StorageConfig, get_storage_config


def test_data_dir_defaults_to_relative_data(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NVRSYNC_DATA_DIR", raising=False)

    assert get_storage_config().data_dir == Path("data")


def test_data_dir_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("NVRSYNC_DATA_DIR", str(tmp_path))

    storage = get_storage_config()

    assert storage.dataset_path("4326/naturreservat.geojson") == (
        tmp_path.resolve() / "4326" / "naturreservat.geojson"
    )
    assert storage.operators_path().name == "forvaltare.json"
    assert storage.municipalities_path().name == "municipalities.json"


def test_progress_dir_is_created_on_demand(tmp_path: Path) -> None:
    storage = StorageConfig(data_dir=tmp_path / "nested")

    assert not (tmp_path / "nested" / "progress").exists()
    path = storage.progress_dir()

    assert path.is_dir()
    assert storage.progress_dir(ensure=False) == path
