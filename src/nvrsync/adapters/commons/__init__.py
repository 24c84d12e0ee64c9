"""Wikimedia Commons adapter package."""

from __future__ import annotations

from .store import CommonsDocumentStore

__all__ = ["CommonsDocumentStore"]
