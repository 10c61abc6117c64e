from __future__ import annotations

import io
import os
import sys
import pytest
import logging
import threading
from typing import Generator
from unittest.mock import patch, MagicMock

from deprules.constants import LOG_DEFAULT_FORMAT, LOG_VERBOSE_FORMAT
from deprules.utils.logger import (
    ColoredFormatter,
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_severity,
    level_for_verbosity,
    setup_logging,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Clean up logger state before and after each test.

    This fixture ensures tests don't interfere with each other by:
    - Clearing all handlers from the deprules logger
    - Resetting the global configuration flag

    Yields:
        None
    """
    root_logger = logging.getLogger("deprules")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)

    import deprules.utils.logger as logger_module

    logger_module._logging_configured = False

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    logger_module._logging_configured = False


@pytest.fixture
def captured_stream() -> io.StringIO:
    """Provide a StringIO stream for capturing log output."""
    return io.StringIO()


def _record(level: int, msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestColoredFormatter:
    """Tests for ColoredFormatter ANSI color formatting."""

    def test_init_default_values(self) -> None:
        """Test ColoredFormatter initializes with color enabled by default."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s")

        assert formatter.use_color is True
        assert formatter._fmt == "%(levelname)s: %(message)s"

    def test_init_custom_values(self) -> None:
        """Test ColoredFormatter accepts custom configuration."""
        formatter = ColoredFormatter(
            "%(levelname)s: %(message)s",
            datefmt="%Y-%m-%d",
            use_color=False,
        )

        assert formatter.use_color is False
        assert formatter.datefmt == "%Y-%m-%d"

    def test_color_codes_defined(self) -> None:
        """Test ColoredFormatter has color codes for all log levels."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            assert ColoredFormatter.COLORS[level].startswith("\033[")

        assert ColoredFormatter.RESET == "\033[0m"

    def test_format_with_color_enabled(self) -> None:
        """Test formatting applies ANSI colors when enabled.

        When color is enabled and the terminal supports it, the level
        name should be wrapped in ANSI escape codes.
        """
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            result = formatter.format(_record(logging.INFO))

        assert "\033[" in result
        assert "INFO" in result
        assert "Test message" in result

    def test_format_with_color_disabled(self) -> None:
        """Test formatting skips colors when disabled."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        result = formatter.format(_record(logging.WARNING, "Warning message"))

        assert result == "WARNING: Warning message"

    def test_format_restores_original_record(self) -> None:
        """Test formatting leaves the record's level name untouched.

        Other handlers formatting the same record must see the plain name.
        """
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)
        record = _record(logging.ERROR)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            formatter.format(record)

        assert record.levelname == "ERROR"

    def test_format_custom_level_uncolored(self) -> None:
        """Test levels without a color entry are formatted plainly."""
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)
        record = _record(25)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            result = formatter.format(record)

        assert "\033[" not in result

    def test_should_use_color_no_color_env(self) -> None:
        """Test color is disabled when NO_COLOR environment variable is set."""
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            assert ColoredFormatter._should_use_color() is False

    def test_should_use_color_ci_env(self) -> None:
        """Test color is disabled in CI environments."""
        with patch.dict(os.environ, {"CI": "true"}, clear=True):
            assert ColoredFormatter._should_use_color() is False

    def test_should_use_color_tty(self) -> None:
        """Test color is enabled for TTY streams."""
        with patch.dict(os.environ, {}, clear=True):
            with patch.object(sys.stderr, "isatty", return_value=True):
                assert ColoredFormatter._should_use_color() is True

    def test_should_use_color_non_tty(self) -> None:
        """Test color is disabled for non-TTY streams."""
        with patch.dict(os.environ, {}, clear=True):
            with patch.object(sys.stderr, "isatty", return_value=False):
                assert ColoredFormatter._should_use_color() is False

    def test_should_use_color_no_isatty_attribute(self) -> None:
        """Test color detection handles missing isatty() gracefully."""
        with patch.dict(os.environ, {}, clear=True):
            mock_stderr = MagicMock()
            del mock_stderr.isatty

            with patch("sys.stderr", mock_stderr):
                assert ColoredFormatter._should_use_color() is False


@pytest.mark.unit
class TestLevelMapping:
    """Tests for verbosity and severity level mapping."""

    @pytest.mark.parametrize(
        "verbose,level",
        [
            (0, logging.WARNING),
            (1, logging.INFO),
            (2, logging.DEBUG),
            (5, logging.DEBUG),
        ],
    )
    def test_level_for_verbosity(self, verbose: int, level: int) -> None:
        assert level_for_verbosity(verbose) == level

    @pytest.mark.parametrize(
        "severity,level",
        [
            ("OK", logging.DEBUG),
            ("INFO", logging.DEBUG),
            ("VERIFY", logging.INFO),
            ("BAD", logging.WARNING),
            ("bad", logging.WARNING),
        ],
    )
    def test_level_for_severity(self, severity: str, level: int) -> None:
        """Test blocking findings are logged louder than informational ones."""
        assert level_for_severity(severity) == level

    def test_level_for_unknown_severity(self) -> None:
        assert level_for_severity("UNKNOWN") == logging.INFO


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging configuration function."""

    def test_setup_default_config(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging with default configuration."""
        setup_logging(stream=captured_stream)

        logger = logging.getLogger("deprules")
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logger.propagate is False

    def test_setup_custom_level(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging with custom log level."""
        setup_logging(level=logging.DEBUG, stream=captured_stream)

        logger = logging.getLogger("deprules")
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG

    def test_setup_verbose_format(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging picks the format from the verbose flag."""
        setup_logging(verbose=True, stream=captured_stream)
        verbose_formatter = logging.getLogger("deprules").handlers[0].formatter

        setup_logging(verbose=False, stream=captured_stream)
        default_formatter = logging.getLogger("deprules").handlers[0].formatter

        assert verbose_formatter._fmt == LOG_VERBOSE_FORMAT
        assert default_formatter._fmt == LOG_DEFAULT_FORMAT

    def test_setup_default_stream(self, clean_logger_state: None) -> None:
        """Test setup_logging uses stderr by default."""
        setup_logging()

        handler = logging.getLogger("deprules").handlers[0]

        assert handler.stream is sys.stderr

    def test_setup_clears_previous_handlers(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging removes existing handlers.

        Multiple calls should not accumulate handlers.
        """
        setup_logging(stream=captured_stream)
        logger = logging.getLogger("deprules")
        first_handler = logger.handlers[0]

        setup_logging(stream=captured_stream)

        assert len(logger.handlers) == 1
        assert logger.handlers[0] is not first_handler

    def test_setup_sets_configured_flag(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging sets global configuration flag."""
        assert is_logging_configured() is False

        setup_logging(stream=captured_stream)

        assert is_logging_configured() is True

    def test_setup_thread_safe(self, clean_logger_state: None) -> None:
        """Test concurrent setup_logging calls leave exactly one handler."""

        def configure_logging(stream: io.StringIO) -> None:
            setup_logging(stream=stream)

        threads = [
            threading.Thread(target=configure_logging, args=(io.StringIO(),))
            for _ in range(10)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(logging.getLogger("deprules").handlers) == 1

    def test_setup_respects_no_color_env(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging respects NO_COLOR environment variable."""
        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            setup_logging(stream=captured_stream)

        formatter = logging.getLogger("deprules").handlers[0].formatter

        assert isinstance(formatter, ColoredFormatter)
        assert formatter.use_color is False

    def test_setup_filters_debug_at_info_level(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test setup_logging filters messages below configured level."""
        setup_logging(level=logging.INFO, stream=captured_stream)

        logger = get_logger("core.inspector")
        logger.debug("Debug message")
        logger.info("Info message")

        output = captured_stream.getvalue()
        assert "Debug message" not in output
        assert "Info message" in output


@pytest.mark.unit
class TestGetLogger:
    """Tests for get_logger."""

    def test_get_logger_no_name(self, clean_logger_state: None) -> None:
        """Test get_logger without a name returns the package root logger."""
        assert get_logger().name == "deprules"
        assert get_logger("").name == "deprules"
        assert get_logger("deprules").name == "deprules"

    def test_get_logger_with_simple_name(self, clean_logger_state: None) -> None:
        assert get_logger("parser").name == "deprules.parser"

    def test_get_logger_with_qualified_name(self, clean_logger_state: None) -> None:
        assert get_logger("deprules.core.macros").name == "deprules.core.macros"

    def test_get_logger_adds_null_handler(self, clean_logger_state: None) -> None:
        """Test loggers stay silent until logging is configured."""
        logger = get_logger("quiet")

        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_get_logger_multiple_calls_same_instance(
        self, clean_logger_state: None
    ) -> None:
        assert get_logger("manifest") is get_logger("manifest")


@pytest.mark.unit
class TestDisableLogging:
    """Tests for disable_logging."""

    def test_disable_resets_state(
        self, clean_logger_state: None, captured_stream: io.StringIO
    ) -> None:
        """Test disable_logging silences output and resets the flag."""
        setup_logging(stream=captured_stream)

        disable_logging()
        logging.getLogger("deprules").warning("Should not appear")

        root_logger = logging.getLogger("deprules")
        assert is_logging_configured() is False
        assert root_logger.level == logging.NOTSET
        assert all(isinstance(h, logging.NullHandler) for h in root_logger.handlers)
        assert captured_stream.getvalue() == ""

    def test_disable_idempotent(self, clean_logger_state: None) -> None:
        disable_logging()
        disable_logging()

        assert len(logging.getLogger("deprules").handlers) == 1
