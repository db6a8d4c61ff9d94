"""Custom exception hierarchy for the SQS queue migration tool."""

from __future__ import annotations


class MigratorError(Exception):
    """Base exception for all migration-related errors."""


class ConfigError(MigratorError):
    """Raised when flags or configuration values are invalid or missing."""


class QueueAPIError(MigratorError):
    """Raised when a queue API call fails as a whole and the run must abort."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        queue: str = "",
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.queue = queue
        self.code = code


class QueueResolutionError(QueueAPIError):
    """Raised when a queue name cannot be resolved to a queue URL."""
