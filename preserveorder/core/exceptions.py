"""
Custom exceptions for preserveorder.

Provides a small hierarchy so callers can catch every library failure at once.
"""

from typing import Any, Dict, Optional


class PreserveOrderError(Exception):
    """Base exception for all preserveorder errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(PreserveOrderError):
    """Raised when there are configuration issues."""

    pass


class InvalidInputError(PreserveOrderError):
    """Input sequences violate the merge preconditions."""

    pass


class CSVParsingError(PreserveOrderError):
    """CSV reading and header extraction errors."""

    pass
