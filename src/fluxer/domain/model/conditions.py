"""Status conditions and the helpers that keep a condition list keyed by type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final, Protocol

from .meta import format_timestamp, parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

READY: Final[str] = "Ready"

PROGRESSING_REASON: Final[str] = "Progressing"
RECONCILIATION_FAILED_REASON: Final[str] = "ReconciliationFailed"


class ConditionStatus(StrEnum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass(frozen=True, slots=True, kw_only=True)
class Condition:
    """One observed condition, as found in ``status.conditions``."""

    type: str
    status: ConditionStatus
    reason: str
    message: str = ""
    last_transition_time: datetime | None = None
    observed_generation: int | None = None

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {"type": self.type, "status": str(self.status)}
        if self.observed_generation is not None:
            manifest["observedGeneration"] = self.observed_generation
        if self.last_transition_time is not None:
            manifest["lastTransitionTime"] = format_timestamp(self.last_transition_time)
        manifest["reason"] = self.reason
        manifest["message"] = self.message
        return manifest


class ConditionHolder(Protocol):
    """Objects exposing their condition list for mirroring."""

    def get_conditions(self) -> list[Condition]: ...

    def set_conditions(self, conditions: list[Condition]) -> None: ...


def conditions_from_status(status: Mapping[str, Any]) -> list[Condition]:
    """Read ``status.conditions`` of an opaque child object.

    Entries without a type or with an unknown status value are skipped.
    """

    conditions: list[Condition] = []
    for raw in status.get("conditions") or ():
        if not isinstance(raw, Mapping):
            continue
        condition_type = raw.get("type")
        try:
            condition_status = ConditionStatus(raw.get("status"))
        except ValueError:
            continue
        if not condition_type:
            continue
        generation = raw.get("observedGeneration")
        conditions.append(
            Condition(
                type=str(condition_type),
                status=condition_status,
                reason=str(raw.get("reason") or ""),
                message=str(raw.get("message") or ""),
                last_transition_time=parse_timestamp(raw.get("lastTransitionTime")),
                observed_generation=generation if isinstance(generation, int) else None,
            )
        )
    return conditions


def find_condition(conditions: Sequence[Condition], condition_type: str) -> Condition | None:
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


def set_condition(
    conditions: Sequence[Condition], condition: Condition, *, now: datetime
) -> list[Condition]:
    """Return ``conditions`` with ``condition`` inserted or replacing its type.

    The transition time only moves when the status changes; otherwise the
    existing timestamp is kept so repeated reconciles produce identical output.
    """

    updated: list[Condition] = []
    replaced = False
    for existing in conditions:
        if existing.type != condition.type:
            updated.append(existing)
            continue
        if existing.status == condition.status and existing.last_transition_time is not None:
            transition = existing.last_transition_time
        else:
            transition = condition.last_transition_time or now
        updated.append(replace(condition, last_transition_time=transition))
        replaced = True
    if not replaced:
        transition = condition.last_transition_time or now
        updated.append(replace(condition, last_transition_time=transition))
    return updated


def mirror_condition(
    target: ConditionHolder,
    condition_type: str,
    source: Sequence[Condition],
    *,
    fallback: Condition,
    now: datetime,
    observed_generation: int | None = None,
) -> Condition:
    """Copy ``condition_type`` from ``source`` onto ``target``.

    When ``source`` has no such condition, ``fallback`` is written instead so the
    target never ends up without it. Returns the condition that was written.
    """

    found = find_condition(source, condition_type)
    mirrored = fallback if found is None else found
    written = Condition(
        type=condition_type,
        status=mirrored.status,
        reason=mirrored.reason,
        message=mirrored.message,
        observed_generation=observed_generation,
    )
    target.set_conditions(set_condition(target.get_conditions(), written, now=now))
    return written
