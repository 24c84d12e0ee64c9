"""Temporal fact reconciliation between local objects and remote items."""

from __future__ import annotations

from .context import ReconciliationContext, register_url
from .delta import ReconciliationDelta
from .engine import COMMIT_SUMMARY, CREATE_SUMMARY, ReconciliationEngine
from .freshness import FreshnessPolicy
from .geoshape import GeoshapeDocumentSync, talk_title

__all__ = [
    "COMMIT_SUMMARY",
    "CREATE_SUMMARY",
    "FreshnessPolicy",
    "GeoshapeDocumentSync",
    "ReconciliationContext",
    "ReconciliationDelta",
    "ReconciliationEngine",
    "register_url",
    "talk_title",
]
