from __future__ import annotations

from datetime import UTC, datetime

import pytest

from fluxer.domain.model import ChartSpec, FluxApp, FluxAppSpec, ObjectMeta
from fluxer.domain.reconciliation import FinalizerState, LifecycleController

FINALIZER = "apps.kloudy.uk/finalizer"


class _RecordingApps:
    def __init__(self) -> None:
        self.updated: list[list[str]] = []

    def get_app(self, key: object) -> FluxApp:
        raise NotImplementedError

    def update_app(self, app: FluxApp) -> FluxApp:
        self.updated.append(list(app.metadata.finalizers))
        return app

    def patch_app_status(self, key: object, patch: object) -> None:
        raise NotImplementedError


def _app(*finalizers: str, deleting: bool = False) -> FluxApp:
    return FluxApp(
        metadata=ObjectMeta(
            name="podinfo",
            namespace="apps",
            uid="uid-1",
            finalizers=list(finalizers),
            deletion_timestamp=datetime(2026, 1, 1, tzinfo=UTC) if deleting else None,
        ),
        spec=FluxAppSpec(chart=ChartSpec(repository="oci://ghcr.io/org/charts/podinfo")),
    )


@pytest.mark.parametrize(
    ("app", "expected"),
    [
        (_app(), FinalizerState.UNREGISTERED),
        (_app(FINALIZER), FinalizerState.REGISTERED),
        (_app(FINALIZER, deleting=True), FinalizerState.TERMINATING),
        (_app("example.com/other", deleting=True), FinalizerState.REMOVED),
    ],
)
def test_state_of(app: FluxApp, expected: FinalizerState) -> None:
    controller = LifecycleController(apps=_RecordingApps(), finalizer=FINALIZER)

    assert controller.state_of(app) is expected


def test_register_persists_without_requeue() -> None:
    apps = _RecordingApps()
    controller = LifecycleController(apps=apps, finalizer=FINALIZER)

    result = controller.register(_app("example.com/other"))

    assert apps.updated == [["example.com/other", FINALIZER]]
    assert not result.requeue
    assert result.reason == "finalizer registered"


def test_finalize_cleans_up_before_releasing() -> None:
    apps = _RecordingApps()
    order: list[str] = []

    def cleanup(app: FluxApp) -> None:
        order.append(f"cleanup:{len(apps.updated)}")
        assert app.metadata.has_finalizer(FINALIZER)

    controller = LifecycleController(apps=apps, finalizer=FINALIZER, cleanup=cleanup)

    result = controller.finalize(_app(FINALIZER, "example.com/other", deleting=True))

    assert order == ["cleanup:0"]
    assert apps.updated == [["example.com/other"]]
    assert not result.requeue


def test_cleanup_failure_keeps_finalizer() -> None:
    apps = _RecordingApps()

    def cleanup(_app: FluxApp) -> None:
        raise RuntimeError("cleanup failed")

    controller = LifecycleController(apps=apps, finalizer=FINALIZER, cleanup=cleanup)

    with pytest.raises(RuntimeError):
        controller.finalize(_app(FINALIZER, deleting=True))

    assert apps.updated == []
