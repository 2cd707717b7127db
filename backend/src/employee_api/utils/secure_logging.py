"""Secure logging utilities to keep employee records out of logs.

Database errors quote the failing statement together with its bound
parameters, which for this service are whole employee rows. Outside debug
mode these helpers log the error class and statement shape only.
"""

import logging
import re
from typing import Any

from employee_api.config import get_settings

_DATABASE_URL_PATTERN = re.compile(r"(postgresql|postgres|sqlite)(\+\w+)?://[^\s'\"]+")
# Bound values are always printed on a single line
_SQL_PARAMETERS_PATTERN = re.compile(r"\[parameters: [^\n]*\]")
_BACKGROUND_LINK_PATTERN = re.compile(r"\s*\(Background on this error at: [^)]*\)")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
_PHONE_PATTERN = re.compile(r"\+\d{7,15}\b|\b\d{10,15}\b")
_AMOUNT_PATTERN = re.compile(r"Decimal\('[^']*'\)|\b\d+\.\d{2}\b")

MAX_LOGGED_MESSAGE_LENGTH = 200


def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: Exception) -> str:
    """Sanitize exception message for logging outside debug mode.

    Removes:
    - Database connection strings
    - Bound SQL parameters and the SQLAlchemy background link
    - Email addresses and phone numbers
    - Salary amounts

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message
    """
    error_msg = str(error)

    error_msg = _DATABASE_URL_PATTERN.sub("[DATABASE_URL]", error_msg)
    error_msg = _SQL_PARAMETERS_PATTERN.sub("[parameters: [REDACTED]]", error_msg)
    error_msg = _BACKGROUND_LINK_PATTERN.sub("", error_msg)
    error_msg = _EMAIL_PATTERN.sub("[EMAIL]", error_msg)
    error_msg = _PHONE_PATTERN.sub("[PHONE]", error_msg)
    error_msg = _AMOUNT_PATTERN.sub("[AMOUNT]", error_msg)

    error_msg = " ".join(error_msg.split())
    if len(error_msg) > MAX_LOGGED_MESSAGE_LENGTH:
        error_msg = error_msg[: MAX_LOGGED_MESSAGE_LENGTH - 3] + "..."

    return error_msg


def _log(
    logger: logging.Logger,
    level: int,
    message: str,
    error: Exception | None,
    kwargs: dict[str, Any],
) -> None:
    if is_debug_mode():
        if error:
            logger.log(
                level,
                "%s: %s",
                message,
                error,
                exc_info=error if level >= logging.ERROR else None,
                extra=kwargs,
            )
        else:
            logger.log(level, message, extra=kwargs)
    elif error:
        logger.log(
            level, "%s: %s: %s", message, type(error).__name__, sanitize_exception_message(error)
        )
    else:
        logger.log(level, message)


def log_error(
    logger: logging.Logger,
    message: str,
    error: Exception | None = None,
    **kwargs: Any,
) -> None:
    """Log an error with a detail level that depends on debug mode.

    Args:
        logger: The logger instance to use
        message: The log message (no personal data)
        error: Optional exception to include
        **kwargs: Additional context, only attached in debug mode
    """
    _log(logger, logging.ERROR, message, error, kwargs)


def log_warning(
    logger: logging.Logger,
    message: str,
    error: Exception | None = None,
    **kwargs: Any,
) -> None:
    """Log a warning, such as a rejected duplicate email, without its values."""
    _log(logger, logging.WARNING, message, error, kwargs)
