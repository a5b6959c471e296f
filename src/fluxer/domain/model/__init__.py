"""Public domain model surface."""

from __future__ import annotations

from fluxer.domain.model.app import (
    MATCH_ANY_VERSION,
    ChartSpec,
    ChartStatus,
    FluxApp,
    FluxAppSpec,
    FluxAppStatus,
)
from fluxer.domain.model.conditions import (
    PROGRESSING_REASON,
    READY,
    RECONCILIATION_FAILED_REASON,
    Condition,
    ConditionHolder,
    ConditionStatus,
    conditions_from_status,
    find_condition,
    mirror_condition,
    set_condition,
)
from fluxer.domain.model.kinds import (
    FLUX_APP,
    HELM_RELEASE,
    HELM_REPOSITORY,
    IMAGE_POLICY,
    IMAGE_REPOSITORY,
    KindInfo,
    KindRegistry,
    flux_kinds,
)
from fluxer.domain.model.managed import ManagedObject, ResourceObject
from fluxer.domain.model.meta import (
    NamespacedName,
    ObjectMeta,
    OwnerReference,
    format_timestamp,
    parse_timestamp,
    utcnow,
)

__all__ = [  # noqa: RUF022
    # parent
    "MATCH_ANY_VERSION",
    "ChartSpec",
    "ChartStatus",
    "FluxApp",
    "FluxAppSpec",
    "FluxAppStatus",
    # conditions
    "PROGRESSING_REASON",
    "READY",
    "RECONCILIATION_FAILED_REASON",
    "Condition",
    "ConditionHolder",
    "ConditionStatus",
    "conditions_from_status",
    "find_condition",
    "mirror_condition",
    "set_condition",
    # kinds
    "FLUX_APP",
    "HELM_RELEASE",
    "HELM_REPOSITORY",
    "IMAGE_POLICY",
    "IMAGE_REPOSITORY",
    "KindInfo",
    "KindRegistry",
    "flux_kinds",
    # objects
    "ManagedObject",
    "ResourceObject",
    "NamespacedName",
    "ObjectMeta",
    "OwnerReference",
    "format_timestamp",
    "parse_timestamp",
    "utcnow",
]
