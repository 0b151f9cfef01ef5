"""Scraper exception hierarchy."""

from __future__ import annotations


class ScraperError(Exception):
    """Base exception for all scraper-specific errors."""


class ConfigurationError(ScraperError):
    """Raised when the scraper is given malformed configuration.

    Covers proxy objects missing ``url``, ``username`` or ``password`` and
    serialized cookie / local-storage payloads that are not valid JSON.
    """


class DriverError(ScraperError):
    """Raised when the underlying browser automation driver fails.

    Attributes:
        operation: Name of the driver operation that failed (``launch``, ``goto``, ...).
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
