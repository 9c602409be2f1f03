"""Tests for settings and logging setup."""

import pytest
import structlog
from pydantic import ValidationError

from py_wfc.config import Settings
from py_wfc.core.driver import WFCOptions
from py_wfc.utils.logging import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values."""
        for name in ("WFC_DEFAULT_CHANCE", "WFC_MAX_ATTEMPTS", "WFC_LOG_FORMAT"):
            monkeypatch.delenv(name, raising=False)
        config = Settings(_env_file=None)
        assert config.default_chance == 0.0
        assert config.default_effect_distance == 1
        assert config.max_attempts == 100
        assert config.log_format == "console"

    def test_environment_override(self, monkeypatch):
        """Test WFC_* environment variables."""
        monkeypatch.setenv("WFC_DEFAULT_CHANCE", "0.25")
        monkeypatch.setenv("WFC_MAX_CONTRADICTIONS", "7")
        config = Settings(_env_file=None)
        assert config.default_chance == 0.25
        assert config.max_contradictions == 7

    def test_validation(self, monkeypatch):
        """Test rejected values."""
        monkeypatch.setenv("WFC_DEFAULT_CHANCE", "1.5")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_options_from_settings(self):
        """Test building driver options from settings."""
        config = Settings(_env_file=None, default_chance=0.3, default_effect_distance=2, max_contradictions=None)
        options = WFCOptions.from_settings(config)
        assert options.chance == 0.3
        assert options.effect_distance == 2
        assert options.max_contradictions is None

        options = WFCOptions.from_settings(config, chance=0.9)
        assert options.chance == 0.9


class TestLogging:
    """Test structlog configuration."""

    @pytest.mark.parametrize("fmt", ["json", "console"])
    def test_configure_logging(self, fmt):
        """Test that configuration succeeds and loggers work afterwards."""
        try:
            configure_logging(level="DEBUG", fmt=fmt)
            structlog.get_logger("py_wfc.test").info("configured", fmt=fmt)
        finally:
            structlog.reset_defaults()
