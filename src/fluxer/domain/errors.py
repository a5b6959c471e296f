"""Error taxonomy for the reconciliation core.

Waiting on upstream resolution is not an error; the pipeline reports it through
``ReconcileResult.requeue`` instead.
"""

from __future__ import annotations


class FluxerError(Exception):
    """Base class for errors raised by the reconciliation core."""


class NotFoundError(FluxerError):
    """Raised by clients when the requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        super().__init__(f"{kind} {namespace}/{name} not found")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class ConflictError(FluxerError):
    """Raised by clients when a write lost a race against another writer."""


class InvalidInputError(FluxerError):
    """Raised when the parent specification cannot be interpreted."""


class MalformedUpstreamDataError(FluxerError):
    """Raised when a child resource reports data the pipeline cannot parse."""


class UnsupportedKindError(FluxerError):
    """Raised when a kind has no entry in the kind registry."""


class OwnershipError(FluxerError):
    """Raised when an owner reference cannot be recorded on a child object."""
