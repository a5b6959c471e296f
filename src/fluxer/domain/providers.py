"""Registry provider inference from repository locators."""

from __future__ import annotations

from enum import StrEnum
from urllib.parse import urlsplit

from fluxer.domain.errors import InvalidInputError


class RegistryProvider(StrEnum):
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    GENERIC = "generic"


_HOST_SUFFIXES: tuple[tuple[str, RegistryProvider], ...] = (
    ("amazonaws.com", RegistryProvider.AWS),
    ("azurecr.io", RegistryProvider.AZURE),
    ("gcr.io", RegistryProvider.GCP),
)


def provider_from_url(url: str) -> RegistryProvider:
    """Infer the registry provider from the host of ``url``.

    >>> provider_from_url("oci://myregistry.azurecr.io/app")
    <RegistryProvider.AZURE: 'azure'>
    """

    try:
        host = urlsplit(url).hostname
    except ValueError as exc:
        raise InvalidInputError(f"invalid repository URL: {url}") from exc
    if not host:
        raise InvalidInputError(f"repository URL has no host: {url!r}")
    for suffix, provider in _HOST_SUFFIXES:
        if host == suffix or host.endswith(f".{suffix}"):
            return provider
    return RegistryProvider.GENERIC
