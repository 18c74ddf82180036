"""Custom exception hierarchy for the classification engine.

Only programming and configuration problems are raised. Untrusted listing
text never raises: it degrades to ``Category.UNKNOWN`` with warnings.
"""
from typing import Any, Dict, Optional


class PartSortError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with message and optional structured details."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RuleTableError(PartSortError):
    """Raised when a rule table is corrupt, unreadable or fails validation."""
    pass


class SnapshotUnavailableError(PartSortError):
    """Raised when no rule table has been published to the store."""
    pass


class ConfigurationError(PartSortError):
    """Raised when engine settings are inconsistent."""
    pass
