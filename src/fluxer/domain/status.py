"""Projection of child observations into the parent's chart status."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING

from fluxer.domain.errors import MalformedUpstreamDataError
from fluxer.domain.naming import OCI_SCHEME

if TYPE_CHECKING:
    from fluxer.domain.model import ChartStatus, ManagedObject


def split_image_path(image: str) -> tuple[str, str]:
    """Split ``ghcr.io/org/charts/app`` into ``("ghcr.io/org/charts", "app")``."""

    root, leaf = posixpath.split(image.rstrip("/"))
    if not root or not leaf:
        raise MalformedUpstreamDataError(f"invalid image path: {image!r}")
    return root, leaf


def split_image_reference(reference: str) -> tuple[str, str]:
    """Split ``repo:tag`` on its last colon.

    A colon that belongs to a registry port (``host:5000/app``) does not count as
    a tag separator.
    """

    image, sep, tag = reference.rpartition(":")
    if not sep or not image or not tag or "/" in tag:
        raise MalformedUpstreamDataError(f"invalid image reference: {reference!r}")
    return image, tag


def project_image_source(image_repository: ManagedObject, chart: ChartStatus) -> None:
    """Fill repository and chart name from the committed image source."""

    image = image_repository.spec.get("image")
    if not image:
        return
    root, leaf = split_image_path(str(image))
    chart.repository = OCI_SCHEME + root
    chart.name = leaf


def project_version_selector(image_policy: ManagedObject, chart: ChartStatus) -> None:
    """Fill the chart version from the tag the version selector picked."""

    latest_ref = image_policy.status.get("latestRef")
    if isinstance(latest_ref, dict) and latest_ref.get("tag"):
        chart.version = str(latest_ref["tag"])
        return

    latest_image = image_policy.status.get("latestImage")
    if not latest_image:
        return
    _, tag = split_image_reference(str(latest_image))
    chart.version = tag
