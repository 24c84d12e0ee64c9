"""MediaWiki action API adapter."""

from __future__ import annotations

from .client import MediaWikiAPIError, MediaWikiSession

__all__ = ["MediaWikiAPIError", "MediaWikiSession"]
