"""Custom exceptions for Gmail Reply Tracker."""


class ReplyTrackerError(Exception):
    """Base exception for all Gmail Reply Tracker errors."""


class ConfigError(ReplyTrackerError):
    """Raised when the tracker configuration is missing or invalid."""
