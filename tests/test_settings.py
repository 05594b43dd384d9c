"""Tests for configuration settings and logging setup."""

import logging
from decimal import Decimal
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from moonlit_ledger.config import configure_logging, get_logger, get_settings
from moonlit_ledger.config.settings import FlatSettings


def test_settings_loads_from_env():
    """Test that settings loads from environment variables."""
    settings = get_settings()

    # Set in conftest
    assert settings.log_level == "DEBUG"
    assert settings.employees_file is None


def test_settings_has_defaults(monkeypatch):
    """Test that settings has the bakery's working defaults."""
    monkeypatch.delenv("MOONLIT_LOG_LEVEL", raising=False)
    settings = FlatSettings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.column_row_limit == 100
    assert settings.shift_hours == Decimal("12")
    assert settings.solo_bakery_rate == Decimal("135")
    assert settings.attendance_precision == 6
    assert settings.mineral_unit_price == Decimal("15")


def test_settings_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("MOONLIT_SHIFT_HOURS", "8")
    monkeypatch.setenv("MOONLIT_EMPLOYEES_FILE", str(tmp_path / "rates.yaml"))

    settings = get_settings()

    assert settings.shift_hours == Decimal("8")
    assert settings.employees_file == Path(tmp_path / "rates.yaml")


def test_shift_hours_must_be_positive(monkeypatch):
    monkeypatch.setenv("MOONLIT_SHIFT_HOURS", "0")
    with pytest.raises(ValidationError):
        FlatSettings(_env_file=None)


def test_settings_are_cached():
    """Test that get_settings returns cached instance."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_configure_logging_json():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    configure_logging(level="WARNING", format="json")
    try:
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert structlog.contextvars.merge_contextvars in processors
        assert root.level == logging.WARNING
        assert get_logger("moonlit_ledger.test") is not None
    finally:
        structlog.reset_defaults()
        root.handlers[:] = handlers
        root.setLevel(level)
