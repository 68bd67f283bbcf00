"""
Tests for LoggingConfig.
"""

import pytest

from fluent_http.core.logging.config import LoggingConfig, LogLevel, LogFormat


class TestLoggingConfig:
    """Tests for LoggingConfig dataclass."""

    def test_defaults(self):
        """Default config logs INFO text to console."""
        config = LoggingConfig()

        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.file_path is None
        assert config.max_bytes == 10 * 1024 * 1024
        assert config.backup_count == 5
        assert config.enable_correlation_id is True
        assert config.extra_fields == {}

    def test_create_from_strings(self):
        """create() accepts strings in any case."""
        config = LoggingConfig.create(level="debug", format="JSON")

        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON

    def test_create_with_extra_fields(self):
        config = LoggingConfig.create(extra_fields={"service": "billing"})
        assert config.extra_fields == {"service": "billing"}

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="LOUD")

    def test_invalid_format(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(format="xml")

    def test_file_requires_path(self):
        """enable_file without file_path is rejected."""
        with pytest.raises(ValueError, match="file_path is required"):
            LoggingConfig.create(enable_file=True)

    def test_immutable(self):
        config = LoggingConfig()
        with pytest.raises(Exception):  # frozen dataclass
            config.level = LogLevel.DEBUG
