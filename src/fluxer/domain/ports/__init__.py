"""Domain port definitions for adapters."""

from __future__ import annotations

from .cluster import FluxAppClient, ManagedObjectClient
from .collection import ClusterClients

__all__ = [
    "ClusterClients",
    "FluxAppClient",
    "ManagedObjectClient",
]
