"""Cluster client backed by the official Kubernetes Python client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, NoReturn

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from fluxer.domain.errors import ConflictError, NotFoundError
from fluxer.domain.model import FLUX_APP

from .translator import translate_flux_app, translate_managed_object

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp, KindInfo, ManagedObject, NamespacedName

log = getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_CONFLICT = 409


def load_kubernetes_config(*, context: str | None = None) -> None:
    """Load in-cluster credentials, falling back to the local kubeconfig."""

    try:
        config.load_incluster_config()
    except ConfigException:
        log.debug("Not running in a cluster, loading kubeconfig (context=%s)", context)
        config.load_kube_config(context=context)
    else:
        log.debug("Loaded in-cluster Kubernetes configuration")


class KubernetesClusterClient:
    """Implements ``ManagedObjectClient`` and ``FluxAppClient`` over custom objects."""

    def __init__(self, api: client.CustomObjectsApi | None = None) -> None:
        self.api = api or client.CustomObjectsApi()

    # managed objects

    def get(self, kind: KindInfo, key: NamespacedName) -> ManagedObject:
        try:
            payload = self.api.get_namespaced_custom_object(
                kind.group, kind.version, key.namespace, kind.plural, key.name
            )
        except ApiException as exc:
            _raise_translated(exc, kind, key)
        return translate_managed_object(kind, payload)

    def create(self, obj: ManagedObject) -> ManagedObject:
        kind = obj.kind
        try:
            payload = self.api.create_namespaced_custom_object(
                kind.group, kind.version, obj.namespace, kind.plural, body=obj.to_manifest()
            )
        except ApiException as exc:
            _raise_translated(exc, kind, obj.key)
        return translate_managed_object(kind, payload)

    def patch(self, kind: KindInfo, key: NamespacedName, patch: dict[str, Any]) -> ManagedObject:
        try:
            payload = self.api.patch_namespaced_custom_object(
                kind.group, kind.version, key.namespace, kind.plural, key.name, body=patch
            )
        except ApiException as exc:
            _raise_translated(exc, kind, key)
        return translate_managed_object(kind, payload)

    # parent

    def get_app(self, key: NamespacedName) -> FluxApp:
        try:
            payload = self.api.get_namespaced_custom_object(
                FLUX_APP.group, FLUX_APP.version, key.namespace, FLUX_APP.plural, key.name
            )
        except ApiException as exc:
            _raise_translated(exc, FLUX_APP, key)
        return translate_flux_app(payload)

    def update_app(self, app: FluxApp) -> FluxApp:
        # resourceVersion in the body makes the API server reject stale writes
        body = {
            "metadata": {
                "finalizers": list(app.metadata.finalizers),
                "resourceVersion": app.metadata.resource_version,
            }
        }
        try:
            payload = self.api.patch_namespaced_custom_object(
                FLUX_APP.group,
                FLUX_APP.version,
                app.namespace,
                FLUX_APP.plural,
                app.name,
                body=body,
            )
        except ApiException as exc:
            _raise_translated(exc, FLUX_APP, app.key)
        return translate_flux_app(payload)

    def patch_app_status(self, key: NamespacedName, patch: dict[str, Any]) -> None:
        try:
            self.api.patch_namespaced_custom_object_status(
                FLUX_APP.group,
                FLUX_APP.version,
                key.namespace,
                FLUX_APP.plural,
                key.name,
                body={"status": patch},
            )
        except ApiException as exc:
            _raise_translated(exc, FLUX_APP, key)


def _raise_translated(exc: ApiException, kind: KindInfo, key: NamespacedName) -> NoReturn:
    if exc.status == HTTP_NOT_FOUND:
        raise NotFoundError(kind.kind, key.namespace, key.name) from exc
    if exc.status == HTTP_CONFLICT:
        raise ConflictError(f"conflict writing {kind.kind} {key}: {exc.reason}") from exc
    raise exc
