"""
Tests for engine configuration and logging setup.

Tests cover:
- EngineConfig defaults and environment overrides
- Package logger configuration from the environment
- Debug trace logger with optional file output
"""

import logging

import pytest

from dts.config import (
    DEFAULT_FLATTEN_PREFIX,
    DEFAULT_REPLACE_LIMIT,
    DEFAULT_SORT_ORDER,
    EngineConfig,
)
from dts.logging_config import (
    FlushingStreamHandler,
    configure_logger_for_debug_trace,
    configure_logging,
    debug_log_enabled,
    get_debug_trace_logger,
)


# =============================================================================
# Configuration
# =============================================================================

class TestEngineConfig:
    """Test EngineConfig."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.flatten_prefix == DEFAULT_FLATTEN_PREFIX == "data"
        assert config.sort_order == DEFAULT_SORT_ORDER == "asc"
        assert config.replace_limit == DEFAULT_REPLACE_LIMIT == 0

    def test_from_env_defaults(self, monkeypatch):
        for name in ("DTS_FLATTEN_PREFIX", "DTS_SORT_ORDER", "DTS_REPLACE_LIMIT"):
            monkeypatch.delenv(name, raising=False)
        assert EngineConfig.from_env() == EngineConfig()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DTS_FLATTEN_PREFIX", "json")
        monkeypatch.setenv("DTS_SORT_ORDER", "desc")
        monkeypatch.setenv("DTS_REPLACE_LIMIT", "3")
        config = EngineConfig.from_env()
        assert config == EngineConfig("json", "desc", 3)

    @pytest.mark.parametrize("limit", ["-1", "many"])
    def test_invalid_limit(self, monkeypatch, limit):
        monkeypatch.setenv("DTS_REPLACE_LIMIT", limit)
        with pytest.raises(ValueError):
            EngineConfig.from_env()


# =============================================================================
# Logging
# =============================================================================

class TestConfigureLogging:
    """Test the package logger."""

    def test_default_level(self, monkeypatch, clean_loggers):
        monkeypatch.delenv("DTS_LOG_LEVEL", raising=False)
        logger = configure_logging()
        assert logger.name == "dts"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], FlushingStreamHandler)

    def test_level_from_env(self, monkeypatch, clean_loggers):
        monkeypatch.setenv("DTS_LOG_LEVEL", "debug")
        assert configure_logging().level == logging.DEBUG

    def test_unknown_level_falls_back(self, monkeypatch, clean_loggers):
        monkeypatch.setenv("DTS_LOG_LEVEL", "chatty")
        assert configure_logging().level == logging.WARNING

    def test_handlers_attached_once(self, clean_loggers):
        configure_logging()
        assert len(configure_logging().handlers) == 1


class TestDebugTrace:
    """Test the debug trace logger."""

    def test_stderr_only_by_default(self, monkeypatch, clean_loggers):
        monkeypatch.delenv("DTS_DEBUG_LOG", raising=False)
        assert not debug_log_enabled()
        logger = get_debug_trace_logger()
        assert not logger.propagate
        assert [type(h) for h in logger.handlers] == [FlushingStreamHandler]

    def test_file_output(self, monkeypatch, tmp_path, clean_loggers):
        monkeypatch.setenv("DTS_DEBUG_LOG", "1")
        monkeypatch.setenv("DTS_LOG_DIR", str(tmp_path / "logs"))
        logger = get_debug_trace_logger()
        logger.debug("compiled chain")
        for handler in logger.handlers:
            handler.flush()

        log_file = tmp_path / "logs" / "debug_trace.log"
        assert log_file.exists()
        assert "compiled chain" in log_file.read_text(encoding="utf-8")

    def test_configure_logger_shares_handlers(self, monkeypatch, clean_loggers):
        monkeypatch.delenv("DTS_DEBUG_LOG", raising=False)
        logger = configure_logger_for_debug_trace("dts.tests.trace")
        assert logger.level == logging.DEBUG
        assert logger.handlers == get_debug_trace_logger().handlers
