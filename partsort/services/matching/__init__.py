"""Duplicate candidate matching against catalog fingerprints."""
from partsort.services.matching.matcher import (
    MatcherStrategy,
    RapidFuzzDuplicateMatcher,
    SimilarityBreakdown,
    fingerprint_listing,
)

__all__ = [
    "MatcherStrategy",
    "RapidFuzzDuplicateMatcher",
    "SimilarityBreakdown",
    "fingerprint_listing",
]
