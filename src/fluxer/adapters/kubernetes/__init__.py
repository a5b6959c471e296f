"""Kubernetes adapter for fluxer."""

from __future__ import annotations

from .client import KubernetesClusterClient, load_kubernetes_config
from .translator import translate_flux_app, translate_managed_object

__all__ = [
    "KubernetesClusterClient",
    "load_kubernetes_config",
    "translate_flux_app",
    "translate_managed_object",
]
