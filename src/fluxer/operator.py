"""kopf handlers driving the reconciler from cluster events.

kopf serializes handlers per object, not per parent: a FluxApp event and an
event of one of its children may run at the same time. ``KeyedLocks`` restores
one reconciliation per parent identity.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any

import kopf

from fluxer.app import build_kubernetes_reconciler
from fluxer.config import get_operator_config
from fluxer.domain.model import (
    FLUX_APP,
    HELM_RELEASE,
    HELM_REPOSITORY,
    IMAGE_POLICY,
    IMAGE_REPOSITORY,
    NamespacedName,
)

if TYPE_CHECKING:
    from fluxer.domain.reconciliation import Reconciler, ReconcileResult

log = getLogger(__name__)

ANNOTATION_PREFIX = FLUX_APP.group


@dataclass(slots=True)
class KeyedLocks:
    """One lock per parent identity, alive only while someone holds or waits for it."""

    _guard: threading.Lock = field(default_factory=threading.Lock)
    _locks: dict[NamespacedName, threading.Lock] = field(
        default_factory=dict[NamespacedName, threading.Lock]
    )
    _users: dict[NamespacedName, int] = field(default_factory=dict[NamespacedName, int])

    @contextmanager
    def hold(self, key: NamespacedName) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if not self._users[key]:
                    del self._users[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


def run_reconcile(
    reconciler: Reconciler, locks: KeyedLocks, key: NamespacedName
) -> ReconcileResult:
    with locks.hold(key):
        return reconciler.reconcile(key)


def raise_for_requeue(result: ReconcileResult) -> None:
    """Turn a requeue request into kopf's timed retry."""

    if result.requeue_after is None:
        return
    raise kopf.TemporaryError(
        result.reason or "requeue requested", delay=result.requeue_after.total_seconds()
    )


def owner_key(meta: Mapping[str, Any], namespace: str | None) -> NamespacedName | None:
    """Return the controlling FluxApp of a child object, if any."""

    if not namespace:
        return None
    for reference in meta.get("ownerReferences") or ():
        if (
            reference.get("controller")
            and reference.get("kind") == FLUX_APP.kind
            and reference.get("apiVersion") == FLUX_APP.api_version
        ):
            return NamespacedName(namespace=namespace, name=reference["name"])
    return None


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(
        prefix=ANNOTATION_PREFIX
    )
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix=ANNOTATION_PREFIX, key="last-handled-configuration"
    )
    memo.reconciler = build_kubernetes_reconciler(get_operator_config())
    memo.locks = KeyedLocks()


@kopf.on.resume(FLUX_APP.group, FLUX_APP.version, FLUX_APP.plural)
@kopf.on.create(FLUX_APP.group, FLUX_APP.version, FLUX_APP.plural)
@kopf.on.update(FLUX_APP.group, FLUX_APP.version, FLUX_APP.plural)
def reconcile_flux_app(name: str, namespace: str, memo: kopf.Memo, **_: Any) -> None:
    result = run_reconcile(memo.reconciler, memo.locks, NamespacedName(namespace, name))
    raise_for_requeue(result)


@kopf.on.event(FLUX_APP.group, FLUX_APP.version, FLUX_APP.plural)
def release_deleted_flux_app(
    name: str, namespace: str, meta: Mapping[str, Any], memo: kopf.Memo, **_: Any
) -> None:
    # kopf does not call update handlers once a deletion timestamp is set
    if not meta.get("deletionTimestamp"):
        return
    run_reconcile(memo.reconciler, memo.locks, NamespacedName(namespace, name))


@kopf.on.event(IMAGE_REPOSITORY.group, IMAGE_REPOSITORY.version, IMAGE_REPOSITORY.plural)
@kopf.on.event(IMAGE_POLICY.group, IMAGE_POLICY.version, IMAGE_POLICY.plural)
@kopf.on.event(HELM_REPOSITORY.group, HELM_REPOSITORY.version, HELM_REPOSITORY.plural)
@kopf.on.event(HELM_RELEASE.group, HELM_RELEASE.version, HELM_RELEASE.plural)
def reconcile_owner(
    meta: Mapping[str, Any], namespace: str | None, memo: kopf.Memo, **_: Any
) -> None:
    key = owner_key(meta, namespace)
    if key is None:
        return
    result = run_reconcile(memo.reconciler, memo.locks, key)
    if result.requeue:
        log.debug("%s: requeue after child event left to the FluxApp handler", key)


def run_operator(*, namespace: str | None = None) -> None:
    """Start kopf in the foreground, watching ``namespace`` or the whole cluster."""

    log.info("Starting operator (namespace=%s)", namespace or "<all>")
    kopf.run(
        standalone=True,
        clusterwide=namespace is None,
        namespaces=[namespace] if namespace else (),
    )
