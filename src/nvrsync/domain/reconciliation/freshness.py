"""Guard against overwriting remote facts that are fresher than the local snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date


@dataclass(frozen=True, slots=True)
class FreshnessPolicy:
    def may_supersede(self, existing_published: datetime | None, local_published: date) -> bool:
        """Return whether a remote fact published at ``existing_published`` may be replaced.

        A fact without a published date may always be replaced. Otherwise it may
        be replaced unless it was published strictly after the local snapshot's
        publication date, taken at midnight.
        """

        if existing_published is None:
            return True
        local_midnight = datetime.combine(local_published, time.min, tzinfo=UTC)
        if existing_published.tzinfo is None:
            existing_published = existing_published.replace(tzinfo=UTC)
        return existing_published <= local_midnight
