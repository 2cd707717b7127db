"""Centralized logging configuration for the employee API."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "employee_api"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure the root logger with a single console handler.

    Calling this more than once only updates the level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate handlers
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return root

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    return root
