"""Common utilities and shared functionality."""

from .logging_utils import (
    setup_logging,
    log_server_message,
    log_error,
)

__all__ = [
    "setup_logging",
    "log_server_message",
    "log_error",
]
