from __future__ import annotations

from datetime import timedelta

import pytest

from fluxer.config import DEFAULT_FINALIZER, ConfigurationError, get_operator_config

ENV_VARS = (
    "FLUXER_FINALIZER",
    "FLUXER_REQUEUE_SECONDS",
    "FLUXER_IMAGE_INTERVAL_SECONDS",
    "FLUXER_RELEASE_INTERVAL_SECONDS",
    "FLUXER_NAMESPACE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = get_operator_config()

    assert config.finalizer == DEFAULT_FINALIZER
    assert config.requeue_delay == timedelta(seconds=10)
    assert config.image_scan_interval == timedelta(minutes=1)
    assert config.release_interval == timedelta(minutes=1)
    assert config.namespace is None


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLUXER_FINALIZER", "example.com/finalizer")
    monkeypatch.setenv("FLUXER_REQUEUE_SECONDS", "2.5")
    monkeypatch.setenv("FLUXER_IMAGE_INTERVAL_SECONDS", "300")
    monkeypatch.setenv("FLUXER_NAMESPACE", "apps")

    config = get_operator_config()

    assert config.finalizer == "example.com/finalizer"
    assert config.requeue_delay == timedelta(seconds=2.5)
    assert config.image_scan_interval == timedelta(minutes=5)
    assert config.namespace == "apps"


def test_namespace_argument_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLUXER_NAMESPACE", "apps")

    assert get_operator_config(namespace="other").namespace == "other"


def test_blank_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLUXER_FINALIZER", "   ")
    monkeypatch.setenv("FLUXER_REQUEUE_SECONDS", "")

    config = get_operator_config()

    assert config.finalizer == DEFAULT_FINALIZER
    assert config.requeue_delay == timedelta(seconds=10)


@pytest.mark.parametrize("value", ["soon", "-1"])
def test_invalid_seconds_are_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("FLUXER_REQUEUE_SECONDS", value)

    with pytest.raises(ConfigurationError) as excinfo:
        get_operator_config()

    assert "FLUXER_REQUEUE_SECONDS" in str(excinfo.value)
