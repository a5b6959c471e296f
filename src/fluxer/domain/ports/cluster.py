"""Ports for reading and writing cluster objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp, KindInfo, ManagedObject, NamespacedName


@runtime_checkable
class ManagedObjectClient(Protocol):
    """Read/write contract for child objects of any registered kind."""

    def get(self, kind: KindInfo, key: NamespacedName) -> ManagedObject:
        """Return the stored object; raise ``NotFoundError`` when it is absent."""
        ...

    def create(self, obj: ManagedObject) -> ManagedObject: ...

    def patch(
        self, kind: KindInfo, key: NamespacedName, patch: dict[str, Any]
    ) -> ManagedObject: ...


@runtime_checkable
class FluxAppClient(Protocol):
    """Read/write contract for the parent resource."""

    def get_app(self, key: NamespacedName) -> FluxApp:
        """Return the stored parent; raise ``NotFoundError`` when it is absent."""
        ...

    def update_app(self, app: FluxApp) -> FluxApp:
        """Write metadata changes (finalizers) guarded by ``resourceVersion``."""
        ...

    def patch_app_status(self, key: NamespacedName, patch: dict[str, Any]) -> None: ...
