"""Reconciliation core for ``FluxApp`` resources.

Flow per invocation:
1) load the parent and classify its finalizer state
2) register or release the finalizer when needed (own write, no chain)
3) run the chain: image source, version selector, [gate], chart source, release
4) persist the rebuilt parent status once
"""

from __future__ import annotations

from .chain import ChainStage, build_chain
from .lifecycle import CleanupHook, FinalizerState, LifecycleController
from .pipeline import ReconciliationPipeline
from .reconciler import Reconciler
from .results import ReconcileResult
from .specs import ChainSettings

__all__ = [
    "ChainSettings",
    "ChainStage",
    "CleanupHook",
    "FinalizerState",
    "LifecycleController",
    "ReconcileResult",
    "ReconciliationPipeline",
    "Reconciler",
    "build_chain",
]
