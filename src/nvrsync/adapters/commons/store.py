"""Wikimedia Commons implementation of the document store port."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from nvrsync.adapters.mediawiki import MediaWikiAPIError

if TYPE_CHECKING:
    from nvrsync.adapters.mediawiki import MediaWikiSession

log = getLogger(__name__)


class CommonsDocumentStore:
    """Reads and writes page text in the main slot of Commons pages."""

    def __init__(self, session: MediaWikiSession) -> None:
        self._session = session

    def get_document(self, title: str) -> str | None:
        payload = self._session.get(
            {
                "action": "query",
                "prop": "revisions",
                "rvprop": "content",
                "rvslots": "main",
                "titles": title,
            }
        )
        pages: list[dict[str, Any]] = payload.get("query", {}).get("pages", [])
        if not pages:
            raise MediaWikiAPIError("bad-payload", f"No page returned for {title!r}")
        page = pages[0]
        if page.get("missing") or page.get("invalid"):
            return None
        revisions = page.get("revisions") or []
        if not revisions:
            return None
        return str(revisions[0]["slots"]["main"]["content"])

    def put_document(self, title: str, content: str, *, summary: str) -> None:
        payload = self._session.post(
            {"action": "edit", "title": title, "text": content, "summary": summary}
        )
        result = payload.get("edit", {}).get("result")
        if result != "Success":
            raise MediaWikiAPIError("edit-failed", f"Editing {title!r} returned {result!r}")
        log.debug("Saved %s (revision %s)", title, payload["edit"].get("newrevid"))
