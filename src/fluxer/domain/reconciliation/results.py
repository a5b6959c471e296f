"""Outcome of one reconciliation invocation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """What the caller should do next.

    ``requeue_after`` set means "call again after this delay": the chain is
    waiting on upstream data, which is a normal state and not a failure. Hard
    failures are raised instead, so callers never confuse the two.
    """

    requeue_after: timedelta | None = None
    reason: str = ""

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None

    @classmethod
    def done(cls, *, reason: str = "") -> ReconcileResult:
        return cls(reason=reason)

    @classmethod
    def requeue_in(cls, delay: timedelta, *, reason: str = "") -> ReconcileResult:
        return cls(requeue_after=delay, reason=reason)
