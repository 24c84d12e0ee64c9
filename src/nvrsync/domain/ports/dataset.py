"""Port for reading the local dataset snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from nvrsync.domain.model import LocalObject


@runtime_checkable
class DatasetReader(Protocol):
    def iter_objects(self) -> Iterator[LocalObject]:
        """Yield processable objects in dataset order, file after file."""
        ...
