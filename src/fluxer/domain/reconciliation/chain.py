"""The fixed four-stage chain derived from a ``FluxApp``."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from fluxer.domain.model import (
    HELM_RELEASE,
    HELM_REPOSITORY,
    IMAGE_POLICY,
    IMAGE_REPOSITORY,
    PROGRESSING_REASON,
    READY,
    Condition,
    ConditionStatus,
    mirror_condition,
)
from fluxer.domain.naming import (
    helm_release_name,
    helm_repository_name,
    image_policy_name,
    image_repository_name,
)
from fluxer.domain.status import project_image_source, project_version_selector

from .specs import (
    ChainSettings,
    helm_release_spec,
    helm_repository_spec,
    image_policy_spec,
    image_repository_spec,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from fluxer.domain.model import FluxApp, KindInfo, ManagedObject

type Projection = Callable[[ManagedObject, FluxApp], None]

RELEASE_NOT_READY_MESSAGE = "HelmRelease is not ready"


@dataclass(frozen=True, slots=True, kw_only=True)
class ChainStage:
    """One step of the chain: which object to converge and how.

    ``requires_resolved_chart`` marks stages that may only run once the chart
    repository, name and version are all known.
    """

    label: str
    kind: KindInfo
    object_name: Callable[[FluxApp], str]
    build_spec: Callable[[FluxApp], dict[str, Any]]
    project: Projection | None = None
    requires_resolved_chart: bool = False
    applies: Callable[[FluxApp], bool] | None = None

    def is_applicable(self, app: FluxApp) -> bool:
        return self.applies is None or self.applies(app)


def _project_image_source(obj: ManagedObject, app: FluxApp) -> None:
    project_image_source(obj, app.status.chart)


def _project_version_selector(obj: ManagedObject, app: FluxApp) -> None:
    project_version_selector(obj, app.status.chart)


def _mirror_release_ready(
    obj: ManagedObject, app: FluxApp, *, clock: Callable[[], datetime]
) -> None:
    mirror_condition(
        app,
        READY,
        obj.conditions(),
        fallback=Condition(
            type=READY,
            status=ConditionStatus.FALSE,
            reason=PROGRESSING_REASON,
            message=RELEASE_NOT_READY_MESSAGE,
        ),
        now=clock(),
        observed_generation=app.metadata.generation,
    )


def _chart_source_name(app: FluxApp) -> str:
    return helm_repository_name(app.status.chart.repository)


def _has_resolved_repository(app: FluxApp) -> bool:
    return bool(app.status.chart.repository)


def build_chain(
    settings: ChainSettings, *, clock: Callable[[], datetime]
) -> tuple[ChainStage, ...]:
    """Return the ordered stages: image source, version selector, chart source, release."""

    return (
        ChainStage(
            label="image-source",
            kind=IMAGE_REPOSITORY,
            object_name=image_repository_name,
            build_spec=partial(image_repository_spec, settings=settings),
            project=_project_image_source,
        ),
        ChainStage(
            label="version-selector",
            kind=IMAGE_POLICY,
            object_name=image_policy_name,
            build_spec=image_policy_spec,
            project=_project_version_selector,
        ),
        ChainStage(
            label="chart-source",
            kind=HELM_REPOSITORY,
            object_name=_chart_source_name,
            build_spec=helm_repository_spec,
            requires_resolved_chart=True,
            applies=_has_resolved_repository,
        ),
        ChainStage(
            label="release",
            kind=HELM_RELEASE,
            object_name=helm_release_name,
            build_spec=partial(helm_release_spec, settings=settings),
            project=partial(_mirror_release_ready, clock=clock),
            requires_resolved_chart=True,
        ),
    )
