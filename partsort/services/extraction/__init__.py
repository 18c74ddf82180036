"""Signal extraction from normalized listing text."""
from partsort.services.extraction.extractors import (
    EXTRACTOR_REGISTRY,
    BrandExtractor,
    KeywordExtractor,
    NumericSpecExtractor,
    SignalExtractor,
    StructuralExtractor,
    create_all_extractors,
    create_extractor,
    extract_all_signals,
)

__all__ = [
    "EXTRACTOR_REGISTRY",
    "BrandExtractor",
    "KeywordExtractor",
    "NumericSpecExtractor",
    "SignalExtractor",
    "StructuralExtractor",
    "create_all_extractors",
    "create_extractor",
    "extract_all_signals",
]
