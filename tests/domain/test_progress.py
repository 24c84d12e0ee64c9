from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from nvrsync.domain.progress import LedgerEntry, ProcessDecision, ProgressLedger, decide

CUTOFF = datetime(2020, 4, 26, tzinfo=UTC)


def _entry(key: str = "2000001", *, started: datetime = CUTOFF, **kwargs: object) -> LedgerEntry:
    return LedgerEntry(key=key, started=started, **kwargs)  # type: ignore[arg-type]


def test_never_processed_is_processed() -> None:
    assert decide(None, CUTOFF) is ProcessDecision.PROCESS


def test_failed_entry_is_retried_even_when_recent() -> None:
    entry = _entry(started=CUTOFF + timedelta(days=1), error="Traceback ...")

    assert decide(entry, CUTOFF) is ProcessDecision.RETRY_FAILED


def test_success_before_cutoff_is_reprocessed() -> None:
    entry = _entry(started=CUTOFF - timedelta(seconds=1))

    assert decide(entry, CUTOFF) is ProcessDecision.REPROCESS_STALE


def test_success_at_cutoff_is_skipped() -> None:
    decision = decide(_entry(started=CUTOFF), CUTOFF)

    assert decision is ProcessDecision.SKIP
    assert not decision.should_process


def test_open_entry_chains_to_previous() -> None:
    ledger = ProgressLedger()
    first = ledger.open_entry("2000001", CUTOFF)
    ledger.record(first, retained_generations=10)

    second = ledger.open_entry("2000001", CUTOFF + timedelta(days=1))

    assert second.previous is first
    assert ledger.open_entry("2000002", CUTOFF).previous is None


def test_record_caps_history_length() -> None:
    ledger = ProgressLedger()
    for day in range(5):
        entry = ledger.open_entry("2000001", CUTOFF + timedelta(days=day))
        ledger.record(entry, retained_generations=3)

    latest = ledger.get("2000001")

    assert latest is not None
    assert [entry.started.day for entry in latest.history()] == [30, 29, 28]


def test_truncate_history_requires_one_generation() -> None:
    with pytest.raises(ValueError, match="At least one"):
        _entry().truncate_history(0)


def test_warn_appends_message() -> None:
    entry = _entry()

    entry.warn("Missing SKOG_HA, area forest left untouched.")

    assert entry.warnings == ["Missing SKOG_HA, area forest left untouched."]


def test_summary_counts_latest_entries() -> None:
    ledger = ProgressLedger()
    ok = _entry("1", created_item=True, created_document=True)
    ok.created_claims.extend(["inception date", "area"])
    failed = _entry("2", error="boom")
    failed.warnings.append("something")
    failed.modified_claims.append("area")
    ledger.record(ok, retained_generations=10)
    ledger.record(failed, retained_generations=10)

    summary = ledger.summary()

    assert summary.processed == 2
    assert summary.failed == 1
    assert summary.created_items == 1
    assert summary.created_documents == 1
    assert summary.with_warnings == 1
    assert summary.created_claims["area"] == 1
    assert "Modified Wikidata claim area: 1" in summary.lines()
    assert summary.lines()[0] == "Item processed: 2"
