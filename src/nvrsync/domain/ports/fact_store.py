"""Port for the remote knowledge-graph store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from nvrsync.domain.model import Claim, RemoteItem


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemDraft:
    """Initial content for an item that does not exist yet."""

    claims: tuple[Claim, ...] = ()
    labels: Mapping[str, str] = field(default_factory=dict)
    descriptions: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class FactStore(Protocol):
    def find_item(self, key: str) -> str | None:
        """Return the id of the item carrying identifier ``key``.

        Raises ``AmbiguousResultError`` when more than one item carries it.
        """
        ...

    def get_item(self, item_id: str) -> RemoteItem: ...

    def create_item(self, draft: ItemDraft, *, summary: str) -> RemoteItem: ...

    def commit_delta(
        self,
        item_id: str,
        *,
        to_add: Sequence[Claim],
        to_delete: Sequence[Claim],
        summary: str,
    ) -> None: ...

    def lookup_single_by_unique_label(self, text: str, language: str) -> str | None: ...

    def run_single_result_query(self, query: str) -> str | None: ...

    def missing_entities(self, ids: Iterable[str]) -> list[str]:
        """Return the ids among ``ids`` that do not exist remotely."""
        ...
