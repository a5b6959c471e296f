"""Operator configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Final

from .env import env_seconds, optional_env_var

DEFAULT_FINALIZER: Final[str] = "apps.kloudy.uk/finalizer"
DEFAULT_REQUEUE_SECONDS: Final[float] = 10.0
DEFAULT_IMAGE_INTERVAL_SECONDS: Final[float] = 60.0
DEFAULT_RELEASE_INTERVAL_SECONDS: Final[float] = 60.0


@dataclass(frozen=True, slots=True)
class OperatorConfig:
    """Tunables for one reconciler instance."""

    finalizer: str = DEFAULT_FINALIZER
    requeue_delay: timedelta = timedelta(seconds=DEFAULT_REQUEUE_SECONDS)
    image_scan_interval: timedelta = timedelta(seconds=DEFAULT_IMAGE_INTERVAL_SECONDS)
    release_interval: timedelta = timedelta(seconds=DEFAULT_RELEASE_INTERVAL_SECONDS)
    namespace: str | None = None


def get_operator_config(*, namespace: str | None = None) -> OperatorConfig:
    """Build the operator configuration from ``FLUXER_*`` environment variables.

    ``namespace`` overrides ``FLUXER_NAMESPACE`` when given.
    """

    watched = namespace or optional_env_var("FLUXER_NAMESPACE", "") or None
    return OperatorConfig(
        finalizer=optional_env_var("FLUXER_FINALIZER", DEFAULT_FINALIZER),
        requeue_delay=timedelta(
            seconds=env_seconds("FLUXER_REQUEUE_SECONDS", DEFAULT_REQUEUE_SECONDS)
        ),
        image_scan_interval=timedelta(
            seconds=env_seconds("FLUXER_IMAGE_INTERVAL_SECONDS", DEFAULT_IMAGE_INTERVAL_SECONDS)
        ),
        release_interval=timedelta(
            seconds=env_seconds(
                "FLUXER_RELEASE_INTERVAL_SECONDS", DEFAULT_RELEASE_INTERVAL_SECONDS
            )
        ),
        namespace=watched,
    )
