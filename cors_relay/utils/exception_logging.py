"""
Helpers for turning relay failures into log lines and error strings.
"""

import logging


def _safe_str(obj) -> str:
    """
    Convert an object to string, falling back to repr and then to the type name.

    Args:
        obj: The object to convert to string

    Returns:
        A string representation of the object
    """
    try:
        return str(obj)
    except Exception:
        try:
            return repr(obj)
        except Exception:
            return f"<{type(obj).__name__} object (string conversion failed)>"


def format_exception_message(exception: Exception) -> str:
    """
    Format an exception message for a client-facing error string.

    Several httpx transport errors stringify to "", so the result falls back
    to the exception type name and is never empty.
    """
    if exception is None:
        return "None"
    text = _safe_str(exception)
    return text if text else type(exception).__name__


def log_exception_with_details(
    logger: logging.Logger,
    prefix: str,
    exception: Exception,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with its traceback under a prefix.

    Args:
        logger: The logger instance to use
        prefix: Prefix for the log message (e.g., "[Relay]")
        exception: The exception to log
        level: The logging level to use (default: ERROR)
    """
    logger.log(
        level,
        f"{prefix} Exception: {format_exception_message(exception)}",
        exc_info=exception if exception is not None else False,
    )
