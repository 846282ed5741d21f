"""
Error handling utilities for sanitizing user-facing messages and logging.

Provides consistent error handling across the application:
- Sanitizes error messages to prevent information leakage
- Logs detailed error information for debugging
- Falls back to a module logger when called outside a Flask app context,
  so the services stay usable from tests and background jobs
"""

from __future__ import annotations
import logging
from flask import current_app, has_app_context

_logger = logging.getLogger("plant_agenda")

# User-friendly generic error messages
GENERIC_MESSAGES = {
    "storage": "We couldn't save your progress. Please try again.",
    "validation": "The information provided is invalid. Please check and try again.",
    "notification": "Notifications are not available right now.",
    "not_found": "The requested item was not found.",
    "internal": "Something went wrong. Please try again.",
}


def _get_logger() -> logging.Logger:
    if has_app_context():
        return current_app.logger
    return _logger


def _with_context(message: str, context: dict) -> str:
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        message = f"{message} | Context: {context_str}"
    return message


def sanitize_error(
    error: Exception,
    error_type: str = "internal",
    log_prefix: str = ""
) -> str:
    """
    Sanitize error message for user display and log full details.

    Args:
        error: The exception that occurred
        error_type: Type of error (storage, validation, notification, not_found, internal)
        log_prefix: Optional prefix for log message context

    Returns:
        User-friendly error message

    Examples:
        >>> try:
        ...     plants = plants_from_payload(body.get("plants"))
        ... except ValueError as e:
        ...     msg = sanitize_error(e, "validation", "Invalid plant payload")
    """
    error_message = str(error)
    log_message = f"{log_prefix}: {error_message}" if log_prefix else error_message

    if error_type in ["validation", "not_found"]:
        # Expected errors (bad client input), log as info
        _get_logger().info(f"Expected error - {log_message}")
    else:
        _get_logger().error(f"Unexpected error - {log_message}", exc_info=True)

    return GENERIC_MESSAGES.get(error_type, GENERIC_MESSAGES["internal"])


def log_debug(message: str, **context) -> None:
    _get_logger().debug(_with_context(message, context))


def log_info(message: str, **context) -> None:
    """
    Log an info message with optional context.

    Examples:
        >>> log_info("Seen tips reset for new day", date="2024-01-02")
    """
    _get_logger().info(_with_context(message, context))


def log_warning(message: str, **context) -> None:
    """
    Log a warning with optional context.

    Examples:
        >>> log_warning("Failed to persist seen tips", key="daily-tips-seen")
    """
    _get_logger().warning(_with_context(message, context))


def log_error(message: str, **context) -> None:
    _get_logger().error(_with_context(message, context))
