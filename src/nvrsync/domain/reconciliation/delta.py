"""Ordered add/delete lists for one item."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nvrsync.domain.model import Claim


@dataclass(slots=True)
class ReconciliationDelta:
    to_add: list[Claim] = field(default_factory=list)
    to_delete: list[Claim] = field(default_factory=list)

    def add(self, claim: Claim) -> None:
        self.to_add.append(claim)

    def delete(self, claim: Claim) -> None:
        if claim.claim_id is None:
            raise ValueError("Only saved claims can be deleted")
        if claim not in self.to_delete:
            self.to_delete.append(claim)

    def replace(self, old: Claim, new: Claim) -> None:
        self.delete(old)
        self.add(new)

    def is_empty(self) -> bool:
        return not self.to_add and not self.to_delete

    def __len__(self) -> int:
        return len(self.to_add) + len(self.to_delete)
