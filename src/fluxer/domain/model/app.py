"""The ``FluxApp`` parent resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final

from .conditions import Condition
from .kinds import FLUX_APP, KindInfo
from .meta import NamespacedName, ObjectMeta

MATCH_ANY_VERSION: Final[str] = "*"


@dataclass(slots=True, kw_only=True)
class ChartSpec:
    """Chart requested by the user.

    ``repository`` is the scheme-qualified source locator, for example
    ``oci://ghcr.io/stefanprodan/charts/podinfo``. ``version`` is a semver
    version or range.
    """

    repository: str
    version: str = MATCH_ANY_VERSION


@dataclass(slots=True, kw_only=True)
class FluxAppSpec:
    chart: ChartSpec
    target_namespace: str = ""


@dataclass(slots=True, kw_only=True)
class ChartStatus:
    """Chart coordinates resolved from the image source and version selector."""

    repository: str = ""
    name: str = ""
    version: str = ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.repository and self.name and self.version)

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {"repository": self.repository, "name": self.name}
        if self.version:
            manifest["version"] = self.version
        return manifest


@dataclass(slots=True, kw_only=True)
class FluxAppStatus:
    chart: ChartStatus = field(default_factory=ChartStatus)
    conditions: list[Condition] = field(default_factory=list["Condition"])

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {"chart": self.chart.to_manifest()}
        if self.conditions:
            manifest["conditions"] = [condition.to_manifest() for condition in self.conditions]
        return manifest


@dataclass(slots=True, kw_only=True)
class FluxApp:
    """Parent resource driving one reconciliation chain."""

    metadata: ObjectMeta
    spec: FluxAppSpec
    status: FluxAppStatus = field(default_factory=FluxAppStatus)
    kind: KindInfo = FLUX_APP

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @property
    def key(self) -> NamespacedName:
        return self.metadata.key

    @property
    def version_constraint(self) -> str:
        return self.spec.chart.version or MATCH_ANY_VERSION

    @property
    def target_namespace(self) -> str:
        return self.spec.target_namespace or self.namespace

    @property
    def is_deleting(self) -> bool:
        return self.metadata.deletion_timestamp is not None

    def get_conditions(self) -> list[Condition]:
        return list(self.status.conditions)

    def set_conditions(self, conditions: list[Condition]) -> None:
        self.status.conditions = list(conditions)
