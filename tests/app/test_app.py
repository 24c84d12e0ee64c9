from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from nvrsync.app import RunOptions, ledger_summary, run_batch
from nvrsync.config import StorageConfig
from nvrsync.domain.errors import UnknownEntityError
from tests.support.objects import make_item
from tests.support.stores import FakeDocumentStore, FakeFactStore

OPTIONS = RunOptions(published=date(2020, 2, 25), retrieved=date(2020, 3, 1))


@pytest.fixture
def storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> StorageConfig:
    monkeypatch.delenv("NVRSYNC_RETAINED_GENERATIONS", raising=False)
    dataset = tmp_path / "4326" / "naturreservat.geojson"
    dataset.parent.mkdir()
    feature = {
        "type": "Feature",
        "properties": {
            "NVRID": "2000001",
            "NAMN": "Testreservatet",
            "BESLSTATUS": "Gällande",
            "LAN": "Stockholms Län",
            "IKRAFTDAT": "1996-11-28",
            "AREA_HA": 120.5,
            "LAND_HA": 100.0,
            "SKOG_HA": 80.0,
            "VATTEN_HA": 20.5,
            "IUCNKAT": "IV",
            "FORVALTARE": "Länsstyrelsen i Stockholms län",
        },
        "geometry": {"type": "Point", "coordinates": [18.0, 59.0]},
    }
    dataset.write_text(
        json.dumps({"type": "FeatureCollection", "features": [feature]}), encoding="utf-8"
    )
    (tmp_path / "forvaltare.json").write_text(
        json.dumps([{"sv": "Länsstyrelsen i Stockholms län", "item": "Q500"}]), encoding="utf-8"
    )
    return StorageConfig(data_dir=tmp_path)


def test_batch_updates_item_and_writes_ledger(storage: StorageConfig) -> None:
    facts = FakeFactStore({"Q1": make_item()}, keys={"2000001": "Q1"})

    result = run_batch(
        "nature-reserves", OPTIONS, storage=storage, facts=facts, documents=FakeDocumentStore()
    )

    assert (result.processed, result.failed, result.skipped) == (1, 0, 0)
    [commit] = facts.commits
    assert commit.item_id == "Q1"
    assert (storage.progress_dir() / "NatureReserve.json").exists()

    summary = ledger_summary("nature-reserves", storage=storage)
    assert summary.processed == 1
    assert summary.failed == 0
    assert summary.created_claims["inception date"] == 1


def test_second_batch_skips_recent_entries(storage: StorageConfig) -> None:
    facts = FakeFactStore({"Q1": make_item()}, keys={"2000001": "Q1"})
    run_batch("nature-reserves", OPTIONS, storage=storage, facts=facts, documents=FakeDocumentStore())

    result = run_batch(
        "nature-reserves", OPTIONS, storage=storage, facts=facts, documents=FakeDocumentStore()
    )

    assert (result.processed, result.skipped) == (0, 1)
    assert len(facts.commits) == 1


def test_dry_run_creates_nothing(storage: StorageConfig) -> None:
    facts = FakeFactStore()
    documents = FakeDocumentStore()

    result = run_batch(
        "nature-reserves",
        RunOptions(published=date(2020, 2, 25), retrieved=date(2020, 3, 1), dry_run=True),
        storage=storage,
        facts=facts,
        documents=documents,
    )

    assert result.processed == 1
    assert facts.created == []
    assert facts.commits == []
    assert documents.writes == []


def test_missing_named_entity_aborts_before_processing(storage: StorageConfig) -> None:
    facts = FakeFactStore(missing={"Q34"})

    with pytest.raises(UnknownEntityError):
        run_batch(
            "nature-reserves", OPTIONS, storage=storage, facts=facts, documents=FakeDocumentStore()
        )

    assert not (storage.progress_dir() / "NatureReserve.json").exists()


def test_dry_run_leaves_ledger_for_real_run(storage: StorageConfig) -> None:
    facts = FakeFactStore({"Q1": make_item()}, keys={"2000001": "Q1"})
    dry = RunOptions(published=date(2020, 2, 25), retrieved=date(2020, 3, 1), dry_run=True)

    run_batch("nature-reserves", dry, storage=storage, facts=facts, documents=FakeDocumentStore())

    assert not (storage.progress_dir() / "NatureReserve.json").exists()

    result = run_batch(
        "nature-reserves", OPTIONS, storage=storage, facts=facts, documents=FakeDocumentStore()
    )

    assert result.processed == 1
    assert result.skipped == 0
    [commit] = facts.commits
    assert commit.item_id == "Q1"
