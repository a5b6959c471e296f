"""Object identity and metadata shared by parent and child resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class NamespacedName:
    """Identity of a namespaced object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(slots=True, kw_only=True)
class OwnerReference:
    """Back-reference from a child object to the object that owns it."""

    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = False
    block_owner_deletion: bool = False

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
        }
        if self.controller:
            manifest["controller"] = True
        if self.block_owner_deletion:
            manifest["blockOwnerDeletion"] = True
        return manifest


@dataclass(slots=True, kw_only=True)
class ObjectMeta:
    """Subset of Kubernetes object metadata the engine reads or writes."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int | None = None
    labels: dict[str, str] = field(default_factory=dict[str, str])
    annotations: dict[str, str] = field(default_factory=dict[str, str])
    owner_references: list[OwnerReference] = field(default_factory=list["OwnerReference"])
    finalizers: list[str] = field(default_factory=list[str])
    deletion_timestamp: datetime | None = None

    @property
    def key(self) -> NamespacedName:
        return NamespacedName(namespace=self.namespace, name=self.name)

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.finalizers

    def add_finalizer(self, finalizer: str) -> bool:
        """Append ``finalizer`` unless present; return whether it was added."""

        if finalizer in self.finalizers:
            return False
        self.finalizers.append(finalizer)
        return True

    def remove_finalizer(self, finalizer: str) -> bool:
        """Drop every occurrence of ``finalizer``; return whether any was removed."""

        kept = [value for value in self.finalizers if value != finalizer]
        removed = len(kept) != len(self.finalizers)
        self.finalizers = kept
        return removed

    def to_manifest(self) -> dict[str, Any]:
        manifest: dict[str, Any] = {"name": self.name}
        if self.namespace:
            manifest["namespace"] = self.namespace
        if self.uid:
            manifest["uid"] = self.uid
        if self.resource_version:
            manifest["resourceVersion"] = self.resource_version
        if self.generation is not None:
            manifest["generation"] = self.generation
        if self.labels:
            manifest["labels"] = dict(self.labels)
        if self.annotations:
            manifest["annotations"] = dict(self.annotations)
        if self.owner_references:
            manifest["ownerReferences"] = [ref.to_manifest() for ref in self.owner_references]
        if self.finalizers:
            manifest["finalizers"] = list(self.finalizers)
        if self.deletion_timestamp is not None:
            manifest["deletionTimestamp"] = format_timestamp(self.deletion_timestamp)
        return manifest


def format_timestamp(value: datetime) -> str:
    """Render ``value`` the way the API server does (RFC 3339, UTC, seconds)."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: object) -> datetime | None:
    """Parse an RFC 3339 timestamp; anything unparseable reads as ``None``."""

    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def utcnow() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)
