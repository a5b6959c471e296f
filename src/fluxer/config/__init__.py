"""Application configuration helpers."""

from __future__ import annotations

from .env import env_seconds, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .operator import DEFAULT_FINALIZER, OperatorConfig, get_operator_config

__all__ = [
    "DEFAULT_FINALIZER",
    "ConfigurationError",
    "OperatorConfig",
    "configure_logging",
    "env_seconds",
    "get_operator_config",
    "optional_env_var",
]
