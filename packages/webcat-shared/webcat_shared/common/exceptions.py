"""
Web Catalog Exception Hierarchy

Standardised exception hierarchy for consistent error handling.

Usage guide:
    1. Recoverable errors -> log and continue (e.g. one bad snapshot in a batch)
    2. Unrecoverable errors -> log and re-raise
    3. External errors -> wrap in a custom exception

Example:
    try:
        payload = json.loads(path.read_text())
    except OSError as e:
        raise SnapshotLoadError("Snapshot unreadable", {"path": str(path)}) from e
"""

from typing import Any


class WebCatalogError(Exception):
    """Base exception for all web catalog errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize web catalog error.

        Args:
            message: What went wrong
            details: Ids, paths and other context for logs
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Infrastructure Errors
# ============================================================


class InfrastructureError(WebCatalogError):
    """Infrastructure failures (file system, serialized inputs)."""

    pass


class SnapshotLoadError(InfrastructureError):
    """An object graph snapshot could not be read or decoded."""

    pass


# ============================================================
# Validation Errors
# ============================================================


class ValidationError(WebCatalogError):
    """Rejected user or file input."""

    pass


class InvalidInputError(ValidationError):
    """Malformed argument, e.g. an API id that is not "Interface#api"."""

    pass


class InvalidConfigurationError(ValidationError):
    """ExtractionConfig file that cannot be read or validated."""

    pass
