"""Logging of errors raised while serving requests."""

from __future__ import annotations

import logging

_logger = logging.getLogger("webweave")


def log_error(error: BaseException | str) -> None:
    """Log an exception's message, or a plain message, at error level."""
    _logger.error("%s", error)