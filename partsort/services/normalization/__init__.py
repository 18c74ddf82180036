"""Listing text normalization."""
from partsort.services.normalization.normalizer import (
    NormalizedText,
    TextNormalizer,
    listing_fingerprint,
    normalize_field,
    tokenize,
)

__all__ = [
    "NormalizedText",
    "TextNormalizer",
    "listing_fingerprint",
    "normalize_field",
    "tokenize",
]
