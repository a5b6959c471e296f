"""Finalizer state machine guarding deletion of a ``FluxApp``.

``UNREGISTERED -> REGISTERED -> TERMINATING -> REMOVED``. Registering and
removing the finalizer are always their own writes; the chain never runs in
the same invocation.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .results import ReconcileResult

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp
    from fluxer.domain.ports import FluxAppClient

log = getLogger(__name__)

type CleanupHook = Callable[[FluxApp], None]


class FinalizerState(StrEnum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    TERMINATING = "terminating"
    REMOVED = "removed"


def log_cleanup(app: FluxApp) -> None:
    """Default cleanup hook; owned children are garbage-collected by the cluster."""

    log.info("%s: finalizing, owned objects are left to garbage collection", app.key)


@dataclass(slots=True)
class LifecycleController:
    apps: FluxAppClient
    finalizer: str
    cleanup: CleanupHook = field(default=log_cleanup)

    def state_of(self, app: FluxApp) -> FinalizerState:
        registered = app.metadata.has_finalizer(self.finalizer)
        if app.is_deleting:
            return FinalizerState.TERMINATING if registered else FinalizerState.REMOVED
        return FinalizerState.REGISTERED if registered else FinalizerState.UNREGISTERED

    def register(self, app: FluxApp) -> ReconcileResult:
        """Add the finalizer and persist.

        The write itself produces the update event that runs the chain, so no
        requeue is requested here.
        """

        app.metadata.add_finalizer(self.finalizer)
        self.apps.update_app(app)
        log.info("%s: registered finalizer %s", app.key, self.finalizer)
        return ReconcileResult.done(reason="finalizer registered")

    def finalize(self, app: FluxApp) -> ReconcileResult:
        """Run the cleanup hook, then release the parent for deletion."""

        self.cleanup(app)
        app.metadata.remove_finalizer(self.finalizer)
        self.apps.update_app(app)
        log.info("%s: removed finalizer %s", app.key, self.finalizer)
        return ReconcileResult.done()
