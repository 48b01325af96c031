"""
Console logging for the builder backend.

Messages are only emitted when DEBUG is on. Each call site tags its message
with the area it comes from so request traces can be grepped:
STARTUP, AUTH, USER, TEMPLATE, DASHBOARD, SUGGEST, STORE, SERVER.
Failures that must always be recorded go through the module loggers instead.
"""

import logging
from datetime import datetime
from config.settings import settings


_builder_logger = logging.getLogger("builder")
_builder_handler = logging.StreamHandler()
_builder_handler.setFormatter(
    logging.Formatter('[%(asctime)s] [DEBUG] %(message)s', datefmt='%H:%M:%S')
)
_builder_logger.addHandler(_builder_handler)
_builder_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.WARNING)


def _tagged(message: str, prefix: str) -> str:
    return f"[{prefix}] {message}" if prefix else message


def log_debug(message: str, *args, prefix: str = "") -> None:
    """
    Trace a step of request handling, e.g. log_debug("Login for %s", email, prefix="AUTH").

    Args:
        message: Message, optionally with %-style placeholders
        *args: Values for the placeholders
        prefix: Area tag such as "TEMPLATE" or "SUGGEST"
    """
    if not settings.DEBUG:
        return

    formatted_message = _tagged(message, prefix)
    if args:
        formatted_message = formatted_message % args

    _builder_logger.debug(formatted_message)


def _stamp(mark: str, message: str, prefix: str) -> None:
    if not settings.DEBUG:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {_tagged(f'{mark} {message}', prefix)}")


def log_success(message: str, prefix: str = "") -> None:
    """Print a completed milestone such as a store connection or index build."""
    _stamp("✓", message, prefix)


def log_error(message: str, prefix: str = "") -> None:
    """Print a handled failure: rejected tokens, upstream errors, store errors."""
    _stamp("✗", message, prefix)
