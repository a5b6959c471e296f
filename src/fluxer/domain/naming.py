"""Deterministic names for the child resources of a ``FluxApp``.

Every function here is pure: the same parent identity (and, for the chart
source, the same resolved repository) always yields the same name.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp

OCI_SCHEME: Final[str] = "oci://"
CHART_SUFFIX: Final[str] = "chart"

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]")


def image_repository_name(app: FluxApp) -> str:
    return f"{app.name}-{CHART_SUFFIX}"


def image_policy_name(app: FluxApp) -> str:
    # the policy and the repository it selects from form one unit
    return image_repository_name(app)


def helm_repository_name(repository: str) -> str:
    """Name the chart source after the resolved repository it points at.

    ``oci://ghcr.io/stefanprodan/charts`` becomes ``ghcr-io-stefanprodan-charts``.
    """

    trimmed = repository.removeprefix(OCI_SCHEME).lower()
    return _INVALID_NAME_CHARS.sub("-", trimmed).strip("-")


def helm_release_name(app: FluxApp) -> str:
    return app.name
