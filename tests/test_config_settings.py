"""Tests for runtime settings validation and loading."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from trade_reconciler.config import ReconcilerSettings, SettingsLoadError, config_load_settings


def test_config_settings_defaults_are_valid(monkeypatch: pytest.MonkeyPatch) -> None:
    """Load defaults when no overrides are configured.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when defaults deviate.
    """

    monkeypatch.delenv("SUSPICIOUS_AMOUNT_THRESHOLD", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("DEFAULT_SOURCE_PROFILE", raising=False)

    settings = ReconcilerSettings(_env_file=None)

    assert settings.suspicious_amount_threshold == Decimal("10000")
    assert settings.log_level == "INFO"
    assert settings.default_source_profile == "generic"


def test_config_settings_normalizes_log_level() -> None:
    """Upper-case and validate the configured log level.

    Returns:
        None: Assertions validate log-level normalization.

    Raises:
        AssertionError: Raised when validation deviates.
    """

    assert ReconcilerSettings(_env_file=None, log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        ReconcilerSettings(_env_file=None, log_level="chatty")


def test_config_settings_rejects_non_positive_threshold() -> None:
    """Reject zero or negative suspicious-amount thresholds.

    Returns:
        None: Assertions validate threshold guard.

    Raises:
        AssertionError: Raised when invalid threshold is accepted.
    """

    with pytest.raises(ValidationError):
        ReconcilerSettings(_env_file=None, suspicious_amount_threshold=Decimal("0"))


def test_config_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Raise SettingsLoadError when environment values are invalid.

    Returns:
        None: Assertions validate error wrapping.

    Raises:
        AssertionError: Raised when loader does not wrap validation failures.
    """

    monkeypatch.setenv("APPLICATION_PORT", "70000")

    with pytest.raises(SettingsLoadError):
        config_load_settings()
