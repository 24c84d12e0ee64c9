"""Errors raised while reconciling one object or running a batch.

``ReconciliationError`` subclasses are recoverable: the orchestrator records
them on the object's ledger entry and moves on. ``FatalBatchError`` subclasses
abort the batch once the in-flight entry has been persisted.
"""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for per-object failures."""


class MissingAttributeError(ReconciliationError):
    """Raised when a required dataset attribute is absent."""


class MissingInceptionDateError(MissingAttributeError):
    """Raised when none of the inception date attributes is present."""


class AmbiguousResultError(ReconciliationError):
    """Raised when a lookup expected at most one result and found more."""


class UnsupportedGeometryError(ReconciliationError):
    """Raised when geometry-derived facts cannot be computed for a geometry kind."""


class FatalBatchError(RuntimeError):
    """Base class for invariant violations that stop the batch."""


class GeometryInvariantError(FatalBatchError):
    """Raised when no representative point inside a polygon can be found."""


class UnknownEntityError(FatalBatchError):
    """Raised at startup when a named property or entity does not exist remotely."""
