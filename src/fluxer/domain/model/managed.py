"""Opaque child resources managed by the reconciliation chain."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from .conditions import Condition, conditions_from_status
from .meta import NamespacedName, ObjectMeta

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .kinds import KindInfo


class ResourceObject(Protocol):
    """Capability set shared by every object the store handles."""

    kind: KindInfo
    metadata: ObjectMeta

    @property
    def name(self) -> str: ...

    @property
    def namespace(self) -> str: ...

    def to_manifest(self) -> dict[str, Any]: ...


@dataclass(slots=True, kw_only=True)
class ManagedObject:
    """A child resource whose ``spec`` the engine owns and whose ``status`` it reads.

    Spec and status are kept as plain wire-format mappings; the engine does not
    interpret child schemas beyond the few status fields it projects.
    """

    kind: KindInfo
    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: dict[str, Any] = field(default_factory=dict[str, Any])
    status: dict[str, Any] = field(default_factory=dict[str, Any])

    @property
    def name(self) -> str:
        return self.metadata.name

    @name.setter
    def name(self, value: str) -> None:
        self.metadata.name = value

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @namespace.setter
    def namespace(self, value: str) -> None:
        self.metadata.namespace = value

    @property
    def key(self) -> NamespacedName:
        return self.metadata.key

    def replace_spec(self, spec: Mapping[str, Any]) -> None:
        self.spec = copy.deepcopy(dict(spec))

    def conditions(self) -> list[Condition]:
        return conditions_from_status(self.status)

    def deep_copy(self) -> ManagedObject:
        return copy.deepcopy(self)

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {
            "apiVersion": self.kind.api_version,
            "kind": self.kind.kind,
            "metadata": self.metadata.to_manifest(),
            "spec": copy.deepcopy(self.spec),
        }
        if self.status:
            manifest["status"] = copy.deepcopy(self.status)
        return manifest
