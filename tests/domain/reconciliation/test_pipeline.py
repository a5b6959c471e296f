from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

import pytest

from fluxer.domain.errors import InvalidInputError
from fluxer.domain.model import (
    HELM_RELEASE,
    HELM_REPOSITORY,
    IMAGE_REPOSITORY,
    READY,
    ChartSpec,
    ChartStatus,
    ConditionStatus,
    FluxApp,
    FluxAppSpec,
    FluxAppStatus,
    NamespacedName,
    ObjectMeta,
    find_condition,
    flux_kinds,
)
from fluxer.domain.reconciliation import ChainStage, ReconciliationPipeline
from fluxer.domain.reconciliation.pipeline import WAITING_FOR_CHART_MESSAGE
from fluxer.domain.store import CommitOutcome, ManagedResourceStore
from tests.support.cluster import FIXED_NOW

if TYPE_CHECKING:
    from fluxer.domain.model import KindInfo, ManagedObject
    from tests.support.cluster import FakeCluster


def _app(chart: ChartStatus | None = None) -> FluxApp:
    return FluxApp(
        metadata=ObjectMeta(name="podinfo", namespace="apps", uid="uid-1", generation=2),
        spec=FluxAppSpec(chart=ChartSpec(repository="oci://ghcr.io/org/charts/podinfo")),
        status=FluxAppStatus(chart=chart or ChartStatus()),
    )


def _stage(label: str, kind: KindInfo, calls: list[str], **kwargs: Any) -> ChainStage:
    def build_spec(app: FluxApp) -> dict[str, Any]:
        calls.append(label)
        return {"owner": app.name}

    return ChainStage(
        label=label,
        kind=kind,
        object_name=lambda app: f"{app.name}-{label}",
        build_spec=build_spec,
        **kwargs,
    )


def _pipeline(cluster: FakeCluster, stages: tuple[ChainStage, ...]) -> ReconciliationPipeline:
    return ReconciliationPipeline(
        store=ManagedResourceStore(client=cluster, kinds=flux_kinds()),
        stages=stages,
        requeue_delay=timedelta(seconds=7),
        clock=lambda: FIXED_NOW,
    )


def test_stages_run_in_order(cluster: FakeCluster) -> None:
    calls: list[str] = []
    pipeline = _pipeline(
        cluster,
        (
            _stage("first", IMAGE_REPOSITORY, calls),
            _stage("second", HELM_REPOSITORY, calls),
        ),
    )

    result = pipeline.run(_app())

    assert not result.requeue
    assert calls == ["first", "second"]
    assert [kind for kind, _ in cluster.creates] == ["ImageRepository", "HelmRepository"]


def test_gate_stops_before_dependent_stages(cluster: FakeCluster) -> None:
    calls: list[str] = []
    pipeline = _pipeline(
        cluster,
        (
            _stage("first", IMAGE_REPOSITORY, calls),
            _stage("gated", HELM_RELEASE, calls, requires_resolved_chart=True),
        ),
    )
    app = _app(ChartStatus(repository="oci://ghcr.io/org/charts", name="podinfo"))

    result = pipeline.run(app)

    assert result.requeue_after == timedelta(seconds=7)
    assert "gated" in result.reason
    assert calls == ["first"]
    ready = find_condition(app.get_conditions(), READY)
    assert ready is not None
    assert ready.status is ConditionStatus.FALSE
    assert ready.message == WAITING_FOR_CHART_MESSAGE
    assert ready.observed_generation == 2


def test_resolved_chart_opens_the_gate(cluster: FakeCluster) -> None:
    calls: list[str] = []
    pipeline = _pipeline(
        cluster, (_stage("gated", HELM_RELEASE, calls, requires_resolved_chart=True),)
    )
    app = _app(ChartStatus(repository="oci://ghcr.io/org/charts", name="podinfo", version="1.0.0"))

    assert not pipeline.run(app).requeue
    assert calls == ["gated"]


def test_inapplicable_stage_is_skipped(cluster: FakeCluster) -> None:
    calls: list[str] = []
    pipeline = _pipeline(
        cluster, (_stage("optional", HELM_REPOSITORY, calls, applies=lambda _app: False),)
    )

    pipeline.run(_app())

    assert calls == []
    assert cluster.creates == []


def test_projection_sees_committed_object(cluster: FakeCluster) -> None:
    seen: list[str] = []

    def project(obj: ManagedObject, app: FluxApp) -> None:
        seen.append(obj.metadata.uid)
        app.status.chart.name = obj.spec["owner"]

    stage = _stage("first", IMAGE_REPOSITORY, [], project=project)
    app = _app()

    outcome = _pipeline(cluster, (stage,)).run_stage(stage, app)

    assert outcome is CommitOutcome.CREATED
    assert seen and seen[0]
    assert app.status.chart.name == "podinfo"


def test_failure_stops_the_chain(cluster: FakeCluster) -> None:
    calls: list[str] = []

    def broken(_app: FluxApp) -> dict[str, Any]:
        raise InvalidInputError("bad input")

    failing = ChainStage(
        label="broken",
        kind=HELM_REPOSITORY,
        object_name=lambda app: app.name,
        build_spec=broken,
    )
    pipeline = _pipeline(
        cluster,
        (_stage("first", IMAGE_REPOSITORY, calls), failing, _stage("last", HELM_RELEASE, calls)),
    )

    with pytest.raises(InvalidInputError):
        pipeline.run(_app())

    assert calls == ["first"]
    assert [kind for kind, _ in cluster.creates] == ["ImageRepository"]


def test_existing_object_controlled_by_another_parent_is_patched(cluster: FakeCluster) -> None:
    shared = ChainStage(
        label="shared",
        kind=HELM_REPOSITORY,
        object_name=lambda _app: "charts",
        build_spec=lambda app: {"owner": app.name},
    )
    pipeline = _pipeline(cluster, (shared,))
    first = _app()
    second = FluxApp(
        metadata=ObjectMeta(name="frontend", namespace="apps", uid="uid-2"),
        spec=first.spec,
    )

    assert pipeline.run_stage(shared, first) is CommitOutcome.CREATED
    assert pipeline.run_stage(shared, second) is CommitOutcome.PATCHED

    manifest = cluster.object_manifest("HelmRepository", NamespacedName("apps", "charts"))
    assert manifest["spec"] == {"owner": "frontend"}
    [reference] = manifest["metadata"]["ownerReferences"]
    assert reference["uid"] == "uid-1"
