"""Desired specs for the four chain stages.

Each builder reads the parent spec and, past the first stage, only the chart
status fields projected from the stage before it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Final

from fluxer.domain.durations import go_duration
from fluxer.domain.errors import InvalidInputError
from fluxer.domain.model import HELM_REPOSITORY
from fluxer.domain.naming import helm_repository_name, image_repository_name
from fluxer.domain.providers import provider_from_url

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp

SCHEME_SEPARATOR: Final[str] = "://"
IGNORED_DRIFT_PATHS: Final[tuple[str, ...]] = ("/spec/replicas",)
CRDS_POLICY: Final[str] = "CreateReplace"


@dataclass(frozen=True, slots=True)
class ChainSettings:
    image_scan_interval: timedelta = timedelta(minutes=1)
    release_interval: timedelta = timedelta(minutes=1)


def image_from_source_url(source_url: str) -> str:
    """Strip the scheme from ``oci://host/path`` and return ``host/path``."""

    parts = source_url.split(SCHEME_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:  # noqa: PLR2004
        raise InvalidInputError(f"invalid chart repository URL: {source_url!r}")
    return parts[1]


def image_repository_spec(app: FluxApp, settings: ChainSettings) -> dict[str, Any]:
    source_url = app.spec.chart.repository
    image = image_from_source_url(source_url)
    return {
        "image": image,
        "interval": go_duration(settings.image_scan_interval),
        "provider": str(provider_from_url(source_url)),
    }


def image_policy_spec(app: FluxApp) -> dict[str, Any]:
    return {
        "imageRepositoryRef": {
            "name": image_repository_name(app),
            "namespace": app.namespace,
        },
        "policy": {"semver": {"range": app.version_constraint}},
    }


def helm_repository_spec(app: FluxApp) -> dict[str, Any]:
    repository = app.status.chart.repository
    return {
        "url": repository,
        "type": "oci",
        "provider": str(provider_from_url(repository)),
    }


def helm_release_spec(app: FluxApp, settings: ChainSettings) -> dict[str, Any]:
    chart = app.status.chart
    return {
        "chart": {
            "spec": {
                "chart": chart.name,
                "version": chart.version,
                "sourceRef": {
                    "kind": HELM_REPOSITORY.kind,
                    "name": helm_repository_name(chart.repository),
                    "namespace": app.namespace,
                },
            }
        },
        "interval": go_duration(settings.release_interval),
        "releaseName": app.name,
        "targetNamespace": app.target_namespace,
        "driftDetection": {
            "mode": "enabled",
            "ignore": [{"paths": list(IGNORED_DRIFT_PATHS)}],
        },
        "install": {
            "replace": True,
            "crds": CRDS_POLICY,
            "createNamespace": True,
        },
        "upgrade": {"crds": CRDS_POLICY},
    }
