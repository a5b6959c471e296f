"""Client bundles handed to the reconciler."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fluxer.domain.ports.cluster import FluxAppClient, ManagedObjectClient


@dataclass(slots=True, frozen=True)
class ClusterClients:
    """Clients required to reconcile one ``FluxApp`` chain."""

    apps: FluxAppClient
    objects: ManagedObjectClient
