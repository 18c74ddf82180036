"""Error handling module."""
from partsort.errors.exceptions import (
    PartSortError,
    RuleTableError,
    SnapshotUnavailableError,
    ConfigurationError,
)

__all__ = [
    "PartSortError",
    "RuleTableError",
    "SnapshotUnavailableError",
    "ConfigurationError",
]
