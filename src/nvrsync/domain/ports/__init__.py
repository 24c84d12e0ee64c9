"""Domain port definitions for adapters."""

from __future__ import annotations

from nvrsync.domain.progress import LedgerStore

from .dataset import DatasetReader
from .document_store import DocumentStore
from .fact_store import FactStore, ItemDraft

__all__ = [
    "DatasetReader",
    "DocumentStore",
    "FactStore",
    "ItemDraft",
    "LedgerStore",
]
