"""JSON file persistence for progress ledgers."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nvrsync.domain.progress import LedgerEntry, ProgressLedger

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

BACKUP_SUFFIX = ".backup.1.json"
TEMP_SUFFIX = ".tmp"


def _to_epoch_millis(value: datetime) -> int:
    return round(value.timestamp() * 1000)


def _from_epoch_millis(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=UTC)


class LedgerEntryRecord(BaseModel):
    """On-disk form of a ledger entry, camel-cased like the files the bot has always written."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    nvrid: str
    wikidata_identity: str | None = Field(default=None, alias="wikidataIdentity")
    epoch_started: int = Field(alias="epochStarted")
    epoch_ended: int | None = Field(default=None, alias="epochEnded")
    created_wikidata: bool = Field(default=False, alias="createdWikidata")
    created_claims: list[str] = Field(default_factory=list, alias="createdClaims")
    modified_claims: list[str] = Field(default_factory=list, alias="modifiedClaims")
    deleted_claims: list[str] = Field(default_factory=list, alias="deletedClaims")
    created_commons_geoshape: bool = Field(default=False, alias="createdCommonsGeoshape")
    updated_commons_geoshape: bool = Field(default=False, alias="updatedCommonsGeoshape")
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None
    previous_execution: LedgerEntryRecord | None = Field(default=None, alias="previousExecution")

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> LedgerEntryRecord:
        return cls(
            nvrid=entry.key,
            wikidata_identity=entry.item_id,
            epoch_started=_to_epoch_millis(entry.started),
            epoch_ended=_to_epoch_millis(entry.ended) if entry.ended is not None else None,
            created_wikidata=entry.created_item,
            created_claims=list(entry.created_claims),
            modified_claims=list(entry.modified_claims),
            deleted_claims=list(entry.deleted_claims),
            created_commons_geoshape=entry.created_document,
            updated_commons_geoshape=entry.updated_document,
            warnings=list(entry.warnings),
            error=entry.error,
            previous_execution=(
                cls.from_entry(entry.previous) if entry.previous is not None else None
            ),
        )

    def to_entry(self) -> LedgerEntry:
        return LedgerEntry(
            key=self.nvrid,
            started=_from_epoch_millis(self.epoch_started),
            ended=_from_epoch_millis(self.epoch_ended) if self.epoch_ended is not None else None,
            item_id=self.wikidata_identity,
            created_item=self.created_wikidata,
            created_document=self.created_commons_geoshape,
            updated_document=self.updated_commons_geoshape,
            created_claims=list(self.created_claims),
            modified_claims=list(self.modified_claims),
            deleted_claims=list(self.deleted_claims),
            warnings=list(self.warnings),
            error=self.error,
            previous=self.previous_execution.to_entry() if self.previous_execution else None,
        )


class LedgerRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    processed: dict[str, LedgerEntryRecord] = Field(default_factory=dict)


class JsonLedgerStore:
    """One ledger file per object kind, with a single backup slot.

    A save writes a temporary file first, then moves the current file over the
    backup and the temporary file into place. A crash at any point leaves either
    the main file or the backup readable, and ``load`` falls back to the backup.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.backup_path = path.with_name(path.stem + BACKUP_SUFFIX)
        self.temp_path = path.with_name(path.name + TEMP_SUFFIX)

    def load(self) -> ProgressLedger:
        if not self.path.exists() and not self.backup_path.exists():
            log.info("No ledger at %s, starting empty", self.path)
            return ProgressLedger()
        try:
            record = _read_record(self.path)
        except (OSError, ValidationError):
            if not self.backup_path.exists():
                raise
            log.warning("Ledger %s is unreadable, loading backup %s", self.path, self.backup_path)
            record = _read_record(self.backup_path)
        ledger = ProgressLedger(
            entries={key: entry.to_entry() for key, entry in record.processed.items()}
        )
        log.debug("Loaded ledger %s with %d entries", self.path, len(ledger))
        return ledger

    def save(self, ledger: ProgressLedger) -> None:
        record = LedgerRecord(
            processed={entry.key: LedgerEntryRecord.from_entry(entry) for entry in ledger}
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.temp_path.write_text(
            record.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        if self.path.exists():
            self.path.replace(self.backup_path)
        self.temp_path.replace(self.path)


def _read_record(path: Path) -> LedgerRecord:
    return LedgerRecord.model_validate_json(path.read_bytes())
