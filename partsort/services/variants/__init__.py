"""Variant detection and split planning for bundled listings."""
from partsort.services.variants.detector import (
    VARIANT_PATTERNS,
    VariantDetector,
    VariantPattern,
    VariantStats,
)

__all__ = [
    "VARIANT_PATTERNS",
    "VariantDetector",
    "VariantPattern",
    "VariantStats",
]
