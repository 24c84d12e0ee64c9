"""Port for the wiki holding shape documents."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentStore(Protocol):
    def get_document(self, title: str) -> str | None:
        """Return the current page text, ``None`` when the page does not exist."""
        ...

    def put_document(self, title: str, content: str, *, summary: str) -> None: ...
