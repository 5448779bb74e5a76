"""
Comprehensive tests for shared_utils.logging_utils.

Covers get_scoped_logger(), LogLevel enum, configure_logging() and the
log_execution() decorator.
"""

import logging

import pytest

from shared_utils.constants import LogScope
from shared_utils.logging_utils import (
    LogLevel,
    configure_logging,
    get_scoped_logger,
    log_execution,
)


# ---------------------------------------------------------------------------
# get_scoped_logger
# ---------------------------------------------------------------------------


class TestGetScopedLogger:
    def test_returns_bound_logger(self) -> None:
        logger = get_scoped_logger(LogScope.REST_CLIENT)
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "error", None))

    def test_different_scopes(self) -> None:
        """Calling with different scopes should not crash."""
        for scope in (LogScope.CLI, LogScope.UPLOADER, LogScope.POLLER, LogScope.ASSET_UPLOAD):
            assert get_scoped_logger(scope) is not None


# ---------------------------------------------------------------------------
# LogLevel enum
# ---------------------------------------------------------------------------


class TestLogLevel:
    def test_values(self) -> None:
        assert LogLevel.DEBUG == "DEBUG"
        assert LogLevel.INFO == "INFO"
        assert LogLevel.WARNING == "WARNING"
        assert LogLevel.ERROR == "ERROR"
        assert LogLevel.CRITICAL == "CRITICAL"

    def test_membership(self) -> None:
        assert len(LogLevel) == 5


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        yield
        logging.basicConfig(level=logging.WARNING, handlers=[logging.NullHandler()], force=True)

    def test_quiet_by_default(self) -> None:
        configure_logging(environment="production")
        assert logging.getLogger().level == logging.WARNING

    def test_debug_lowers_threshold(self) -> None:
        configure_logging(environment="development", debug=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_logs_go_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(environment="production", debug=True)
        get_scoped_logger(LogScope.CLI).warning("something_happened", detail="x")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "something_happened" in captured.err

    def test_production_renders_json(self, capsys: pytest.CaptureFixture) -> None:
        configure_logging(environment="production")
        get_scoped_logger(LogScope.POLLER).error("asset_wait_timeout", attempts=3)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert line.startswith("{")
        assert '"scope": "poller"' in line
        assert '"attempts": 3' in line


# ---------------------------------------------------------------------------
# log_execution decorator
# ---------------------------------------------------------------------------


class TestLogExecution:
    def test_passes_through_return_value(self) -> None:
        @log_execution(scope=LogScope.ASSET_UPLOAD)
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5

    def test_propagates_exception(self) -> None:
        @log_execution(scope=LogScope.ASSET_UPLOAD)
        def boom() -> None:
            raise ValueError("oops")

        with pytest.raises(ValueError, match="oops"):
            boom()

    def test_preserves_function_name(self) -> None:
        @log_execution(scope=LogScope.ASSET_UPLOAD)
        def my_func() -> None:
            pass

        assert my_func.__name__ == "my_func"

    def test_debug_level(self) -> None:
        @log_execution(scope=LogScope.UPLOADER, level=LogLevel.DEBUG.value)
        def noop() -> str:
            return "ok"

        assert noop() == "ok"
