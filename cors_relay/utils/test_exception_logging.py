import logging
from unittest.mock import Mock

import httpx

from cors_relay.utils.exception_logging import (
    log_exception_with_details,
    format_exception_message,
)


class BrokenStrException(Exception):
    """An exception that breaks when __str__ is called."""

    def __str__(self):
        raise RuntimeError("Cannot convert to string!")

    def __repr__(self):
        return "BrokenStrException(cannot convert to string)"


class TestFormatExceptionMessage:
    def test_plain_exception(self):
        assert format_exception_message(ValueError("bad value")) == "bad value"

    def test_empty_message_uses_type_name(self):
        assert format_exception_message(httpx.ConnectTimeout("")) == "ConnectTimeout"

    def test_broken_str_falls_back_to_repr(self):
        result = format_exception_message(BrokenStrException())

        assert result == "BrokenStrException(cannot convert to string)"

    def test_none(self):
        assert format_exception_message(None) == "None"


class TestLogExceptionWithDetails:
    def test_logs_once_with_traceback(self):
        logger = Mock(spec=logging.Logger)
        exc = httpx.ConnectError("refused")

        log_exception_with_details(logger, "[Relay]", exc, level=logging.WARNING)

        logger.log.assert_called_once()
        level, message = logger.log.call_args[0]
        assert level == logging.WARNING
        assert message == "[Relay] Exception: refused"
        assert logger.log.call_args[1]["exc_info"] is exc

    def test_empty_message_logs_type_name(self):
        logger = Mock(spec=logging.Logger)

        log_exception_with_details(logger, "[Relay]", httpx.ReadTimeout(""))

        assert logger.log.call_args[0][1] == "[Relay] Exception: ReadTimeout"

    def test_real_logger_output(self, caplog):
        logger = logging.getLogger("test.relay")

        with caplog.at_level(logging.WARNING, logger="test.relay"):
            log_exception_with_details(
                logger, "[Relay]", RuntimeError("upstream gone"), level=logging.WARNING
            )

        assert "[Relay] Exception: upstream gone" in caplog.text
