from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fluxer.domain.model import (
    READY,
    ChartSpec,
    Condition,
    ConditionStatus,
    FluxApp,
    FluxAppSpec,
    ObjectMeta,
    conditions_from_status,
    find_condition,
    mirror_condition,
    set_condition,
)

EARLIER = datetime(2026, 1, 1, tzinfo=UTC)
NOW = datetime(2026, 1, 2, tzinfo=UTC)


def _ready(status: ConditionStatus, reason: str = "Progressing", **kwargs: Any) -> Condition:
    return Condition(type=READY, status=status, reason=reason, **kwargs)


def test_set_condition_inserts_with_transition_time() -> None:
    [written] = set_condition([], _ready(ConditionStatus.FALSE), now=NOW)

    assert written.last_transition_time == NOW


def test_same_status_keeps_transition_time() -> None:
    existing = _ready(ConditionStatus.FALSE, last_transition_time=EARLIER)

    [written] = set_condition([existing], _ready(ConditionStatus.FALSE, "Other"), now=NOW)

    assert written.last_transition_time == EARLIER
    assert written.reason == "Other"


def test_status_change_moves_transition_time() -> None:
    existing = _ready(ConditionStatus.FALSE, last_transition_time=EARLIER)

    [written] = set_condition([existing], _ready(ConditionStatus.TRUE, "Ready"), now=NOW)

    assert written.last_transition_time == NOW


def test_other_condition_types_are_untouched() -> None:
    stalled = Condition(type="Stalled", status=ConditionStatus.FALSE, reason="None")

    updated = set_condition([stalled], _ready(ConditionStatus.TRUE), now=NOW)

    assert [condition.type for condition in updated] == ["Stalled", READY]
    assert updated[0] is stalled


def test_conditions_from_status_skips_invalid_entries() -> None:
    conditions = conditions_from_status(
        {
            "conditions": [
                {"type": "Ready", "status": "True", "reason": "Succeeded"},
                {"type": "Ready", "status": "maybe"},
                {"status": "True"},
                "garbage",
            ]
        }
    )

    assert len(conditions) == 1
    assert find_condition(conditions, READY) == Condition(
        type=READY, status=ConditionStatus.TRUE, reason="Succeeded"
    )


def _app() -> FluxApp:
    return FluxApp(
        metadata=ObjectMeta(name="podinfo", namespace="apps", uid="uid-1", generation=3),
        spec=FluxAppSpec(chart=ChartSpec(repository="oci://ghcr.io/org/charts/podinfo")),
    )


def test_mirror_copies_found_condition() -> None:
    app = _app()
    source = [_ready(ConditionStatus.TRUE, "InstallSucceeded", message="done")]

    mirror_condition(
        app,
        READY,
        source,
        fallback=_ready(ConditionStatus.FALSE),
        now=NOW,
        observed_generation=3,
    )

    [ready] = app.get_conditions()
    assert ready.status is ConditionStatus.TRUE
    assert ready.reason == "InstallSucceeded"
    assert ready.message == "done"
    assert ready.observed_generation == 3


def test_mirror_writes_fallback_when_source_lacks_condition() -> None:
    app = _app()

    written = mirror_condition(
        app, READY, [], fallback=_ready(ConditionStatus.FALSE, message="not ready"), now=NOW
    )

    assert written.status is ConditionStatus.FALSE
    assert find_condition(app.get_conditions(), READY) is not None
