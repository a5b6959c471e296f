"""One reconciliation invocation for one ``FluxApp`` identity.

Invocations for the same identity must be serialized by the caller. Nothing is
cached between calls: the parent and every child are read fresh each time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

from fluxer.domain.errors import NotFoundError
from fluxer.domain.merge_patch import create_merge_patch
from fluxer.domain.model import (
    READY,
    RECONCILIATION_FAILED_REASON,
    Condition,
    ConditionStatus,
    FluxAppStatus,
    set_condition,
    utcnow,
)

from .lifecycle import FinalizerState
from .results import ReconcileResult

if TYPE_CHECKING:
    from datetime import datetime

    from fluxer.domain.model import FluxApp, NamespacedName
    from fluxer.domain.ports import FluxAppClient

    from .lifecycle import LifecycleController
    from .pipeline import ReconciliationPipeline

log = getLogger(__name__)


@dataclass(slots=True)
class Reconciler:
    apps: FluxAppClient
    lifecycle: LifecycleController
    pipeline: ReconciliationPipeline
    clock: Callable[[], datetime] = field(default=utcnow)

    def reconcile(self, key: NamespacedName) -> ReconcileResult:
        """Reconcile the parent at ``key``.

        Returns ``ReconcileResult.done()`` or a requeue request; hard failures
        are raised after the parent status has been marked as failed.
        """

        try:
            app = self.apps.get_app(key)
        except NotFoundError:
            log.debug("%s: FluxApp is gone, nothing to do", key)
            return ReconcileResult.done()

        state = self.lifecycle.state_of(app)
        if state is FinalizerState.REMOVED:
            return ReconcileResult.done()
        if state is FinalizerState.UNREGISTERED:
            return self.lifecycle.register(app)
        if state is FinalizerState.TERMINATING:
            return self.lifecycle.finalize(app)
        return self._reconcile_chain(app)

    def _reconcile_chain(self, app: FluxApp) -> ReconcileResult:
        observed = app.status.to_manifest()
        # rebuilt in full; conditions carry over only for their transition times
        app.status = FluxAppStatus(conditions=app.get_conditions())

        try:
            result = self.pipeline.run(app)
        except Exception as exc:
            log.exception("%s: reconciliation failed", app.key)
            self._mark_failed(app, exc)
            try:
                self._persist_status(app, observed)
            except Exception:
                log.exception("%s: unable to update FluxApp status", app.key)
            raise

        self._persist_status(app, observed)
        return result

    def _mark_failed(self, app: FluxApp, exc: Exception) -> None:
        failed = Condition(
            type=READY,
            status=ConditionStatus.FALSE,
            reason=RECONCILIATION_FAILED_REASON,
            message=str(exc),
            observed_generation=app.metadata.generation,
        )
        app.set_conditions(set_condition(app.get_conditions(), failed, now=self.clock()))

    def _persist_status(self, app: FluxApp, observed: dict[str, Any]) -> None:
        patch = create_merge_patch(observed, app.status.to_manifest())
        if not patch:
            log.debug("%s: status unchanged", app.key)
            return
        self.apps.patch_app_status(app.key, patch)
