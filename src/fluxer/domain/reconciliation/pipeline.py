"""Ordered execution of the chain stages for one ``FluxApp``.

Per stage: build the desired spec, fetch-or-initialize the object, claim it when
nothing controls it yet, replace its spec, commit, and project whatever the
committed object reports back into the parent status. A pre-existing object
another parent already controls keeps that controller; the spec still follows
the latest writer.

The pipeline is fail-fast. Stages committed before an error stay as they are;
the next invocation recomputes the full desired state anyway.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from fluxer.domain.model import (
    PROGRESSING_REASON,
    READY,
    Condition,
    ConditionStatus,
    NamespacedName,
    set_condition,
    utcnow,
)
from fluxer.domain.ownership import controller_of, set_controller_reference

from .results import ReconcileResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime, timedelta

    from fluxer.domain.model import FluxApp
    from fluxer.domain.store import CommitOutcome, ManagedResourceStore

    from .chain import ChainStage

log = getLogger(__name__)

WAITING_FOR_CHART_MESSAGE = "Waiting for the chart version to be resolved"


@dataclass(slots=True)
class ReconciliationPipeline:
    """Run ``stages`` in order against one parent."""

    store: ManagedResourceStore
    stages: Sequence[ChainStage]
    requeue_delay: timedelta
    clock: Callable[[], datetime] = field(default=utcnow)

    def run(self, app: FluxApp) -> ReconcileResult:
        """Converge every applicable stage, or stop at the first unmet dependency."""

        for stage in self.stages:
            if stage.requires_resolved_chart and not app.status.chart.is_resolved:
                log.info(
                    "%s: chart not resolved yet (repository=%r, name=%r, version=%r), "
                    "requeue in %s",
                    app.key,
                    app.status.chart.repository,
                    app.status.chart.name,
                    app.status.chart.version,
                    self.requeue_delay,
                )
                self._mark_waiting(app)
                return ReconcileResult.requeue_in(
                    self.requeue_delay, reason=f"{stage.label} waiting on chart resolution"
                )
            if not stage.is_applicable(app):
                log.debug("%s: skipping %s", app.key, stage.label)
                continue
            self.run_stage(stage, app)
        return ReconcileResult.done()

    def run_stage(self, stage: ChainStage, app: FluxApp) -> CommitOutcome:
        desired = stage.build_spec(app)
        key = NamespacedName(namespace=app.namespace, name=stage.object_name(app))

        record = self.store.fetch(stage.kind.kind, key)
        if not record.existed or controller_of(record.object) is None:
            set_controller_reference(record.object, app)
        record.object.replace_spec(desired)
        outcome = self.store.commit(record)
        log.info("%s: %s %s %s", app.key, stage.kind.kind, key.name, outcome)

        if stage.project is not None:
            stage.project(record.object, app)
        return outcome

    def _mark_waiting(self, app: FluxApp) -> None:
        waiting = Condition(
            type=READY,
            status=ConditionStatus.FALSE,
            reason=PROGRESSING_REASON,
            message=WAITING_FOR_CHART_MESSAGE,
            observed_generation=app.metadata.generation,
        )
        app.set_conditions(set_condition(app.get_conditions(), waiting, now=self.clock()))
