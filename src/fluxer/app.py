"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from fluxer.adapters.kubernetes import KubernetesClusterClient, load_kubernetes_config
from fluxer.config import OperatorConfig, get_operator_config
from fluxer.domain.model import NamespacedName, flux_kinds, utcnow
from fluxer.domain.ports import ClusterClients
from fluxer.domain.reconciliation import (
    ChainSettings,
    LifecycleController,
    ReconciliationPipeline,
    Reconciler,
    build_chain,
)
from fluxer.domain.reconciliation.lifecycle import log_cleanup
from fluxer.domain.store import ManagedResourceStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from fluxer.domain.reconciliation import CleanupHook, ReconcileResult

log = getLogger(__name__)


def build_reconciler(
    clients: ClusterClients,
    *,
    config: OperatorConfig | None = None,
    cleanup: CleanupHook = log_cleanup,
    clock: Callable[[], datetime] = utcnow,
) -> Reconciler:
    """Wire the store, chain, pipeline and lifecycle around ``clients``."""

    effective_config = config or OperatorConfig()
    settings = ChainSettings(
        image_scan_interval=effective_config.image_scan_interval,
        release_interval=effective_config.release_interval,
    )
    store = ManagedResourceStore(client=clients.objects, kinds=flux_kinds())
    pipeline = ReconciliationPipeline(
        store=store,
        stages=build_chain(settings, clock=clock),
        requeue_delay=effective_config.requeue_delay,
        clock=clock,
    )
    lifecycle = LifecycleController(
        apps=clients.apps, finalizer=effective_config.finalizer, cleanup=cleanup
    )
    return Reconciler(apps=clients.apps, lifecycle=lifecycle, pipeline=pipeline, clock=clock)


def build_kubernetes_reconciler(
    config: OperatorConfig | None = None, *, context: str | None = None
) -> Reconciler:
    """Build a reconciler talking to the cluster of the current kube context."""

    load_kubernetes_config(context=context)
    cluster = KubernetesClusterClient()
    return build_reconciler(ClusterClients(apps=cluster, objects=cluster), config=config)


def reconcile_once(
    namespace: str,
    name: str,
    *,
    reconciler: Reconciler | None = None,
    context: str | None = None,
) -> ReconcileResult:
    """Run a single reconciliation of ``namespace/name`` and return its result."""

    effective = reconciler or build_kubernetes_reconciler(get_operator_config(), context=context)
    key = NamespacedName(namespace=namespace, name=name)
    log.info("Reconciling FluxApp %s", key)
    result = effective.reconcile(key)
    log.info(
        "Finished reconciling %s: requeue=%s, after=%s, reason=%s",
        key,
        result.requeue,
        result.requeue_after,
        result.reason or "-",
    )
    return result
