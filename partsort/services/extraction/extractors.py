"""Signal extraction strategies using regex pattern matching.

Each extractor scans the normalized name and description independently and
emits Signal records with spans relative to the field they came from.
Extractors hold no mutable state after construction, so one instance can
serve concurrent classification calls.

Key Components:
    - SignalExtractor: Abstract base class for extraction strategies
    - NumericSpecExtractor: kv, mah, cells, current, sizes and other specs
    - BrandExtractor: brand aliases with advisory product-line bias
    - KeywordExtractor: category-indicative terms, longest first
    - StructuralExtractor: accessory/mount/tray language
    - EXTRACTOR_REGISTRY: Dictionary of available extractors by name
"""
import re
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Pattern, Tuple, Type

import structlog

from partsort.models.signals import Signal, SignalKind, TextField
from partsort.rules.table import RuleTable, compile_term
from partsort.services.normalization import NormalizedText

logger = structlog.get_logger(__name__)

Span = Tuple[int, int]


def _overlaps(span: Span, claimed: Iterable[Span]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)


class SignalExtractor(ABC):
    """Abstract base class for signal extraction strategies.

    All implementations must honor the contract:
        - extract() never raises on arbitrary text
        - signals carry the field they were found in
        - get_extractor_name() returns a unique identifier
    """

    def extract(self, text: NormalizedText) -> List[Signal]:
        """Extract signals from the name and the description.

        Args:
            text: Normalized listing text

        Returns:
            Signals in field order, then position order
        """
        signals: List[Signal] = []
        for source in (TextField.NAME, TextField.DESCRIPTION):
            value = text.text(source)
            if value:
                signals.extend(self.extract_field(value, source))
        return signals

    @abstractmethod
    def extract_field(self, value: str, source: TextField) -> List[Signal]:
        """Extract signals from a single normalized field."""
        pass

    @abstractmethod
    def get_extractor_name(self) -> str:
        """Get the name of this extractor.

        Returns:
            Unique identifier for this extractor (e.g., "numeric")
        """
        pass


class NumericSpecExtractor(SignalExtractor):
    """Extract numeric specifications.

    Extracts:
        - kv: "2400kv", "1900 kv"
        - mah: "1550mah"
        - cells: "4s", "6s2p"
        - current: "35a", "55.5a"
        - c_rating: "75c"
        - size_mm: "220mm"
        - wheelbase: "wheelbase 225mm", "225mm wheelbase"
        - prop_size: "5x4.3x3", "5.1 x 3.1 x 3"
        - tvl: "1200tvl"
        - stator: "2207", "2207.5" (not followed by a unit)
        - mcu: "f405", "f722", "h743"
        - inch: "5 inch", "5.1\""

    Pattern Strategy:
        - Numbers and units may be separated by one optional space
        - Word boundaries keep "v1s" from reading as a cell count
    """

    PATTERNS: Dict[str, List[str]] = {
        "wheelbase": [
            r"wheelbase\s(?:of\s|is\s)?(?:approx\.?\s)?(\d{2,4}(?:\.\d+)?)\s?mm\b",
            r"\b(\d{2,4}(?:\.\d+)?)\s?mm\s(?:wheelbase|wb)\b",
        ],
        "kv": [r"\b(\d{2,5}(?:\.\d+)?)\s?kv\b"],
        "mah": [r"\b(\d{2,5})\s?mah\b"],
        "cells": [r"\b(\d{1,2})s(?:\d{1,2}p)?\b"],
        "current": [r"\b(\d{1,3}(?:\.\d+)?)a\b"],
        "c_rating": [r"\b(\d{2,3})c\b"],
        "size_mm": [r"\b(\d{1,4}(?:\.\d+)?)\s?mm\b"],
        "prop_size": [
            r"\b((?:1[0-3]|[1-9])(?:\.\d+)?)\s?x\s?(\d{1,2}(?:\.\d+)?)\s?x\s?(\d)\b",
        ],
        "tvl": [r"\b(\d{3,4})\s?tvl\b"],
        "stator": [
            r"\b((?:0[6-9]|[1-4]\d)[0-3]\d(?:\.\d)?)\b(?!\s?(?:mah|mm|kv|tvl|mw|w|v|a|s|c)\b)",
        ],
        "mcu": [r"\b(f[1-7](?:\d{2,3})?|h7(?:\d{2,3})?|g4\d{2})\b"],
        "inch": [r"\b(\d{1,2}(?:\.\d+)?)\s?(?:inch(?:es)?\b|in\b|\")"],
    }

    def __init__(self):
        self._compiled: Dict[str, List[Pattern[str]]] = {
            name: [re.compile(p) for p in patterns]
            for name, patterns in self.PATTERNS.items()
        }

    def extract_field(self, value: str, source: TextField) -> List[Signal]:
        signals: List[Signal] = []
        for name, patterns in self._compiled.items():
            seen: List[Span] = []
            for pattern in patterns:
                for match in pattern.finditer(value):
                    span = match.span()
                    if _overlaps(span, seen):
                        continue
                    seen.append(span)
                    signals.append(
                        Signal(
                            kind=SignalKind.NUMERIC_SPEC,
                            name=name,
                            value=self._value(name, match),
                            span=span,
                            source=source,
                        )
                    )
        return signals

    @staticmethod
    def _value(name: str, match: "re.Match[str]") -> str:
        if name == "prop_size":
            return "x".join(match.groups())
        return match.group(1)

    def get_extractor_name(self) -> str:
        return "numeric"


class BrandExtractor(SignalExtractor):
    """Match brand aliases from the rule table.

    Longer aliases are tried first and claim their span, so "gens ace" is
    one brand hit rather than a partial one.
    """

    def __init__(self, table: RuleTable):
        aliases = sorted(
            ((alias, brand) for brand in table.brands for alias in brand.aliases),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
        self._patterns = [(compile_term(re.escape(alias)), brand) for alias, brand in aliases]

    def extract_field(self, value: str, source: TextField) -> List[Signal]:
        signals: List[Signal] = []
        claimed: List[Span] = []
        for pattern, brand in self._patterns:
            for match in pattern.finditer(value):
                span = match.span()
                if _overlaps(span, claimed):
                    continue
                claimed.append(span)
                signals.append(
                    Signal(
                        kind=SignalKind.BRAND,
                        name=brand.key,
                        value=match.group(0),
                        span=span,
                        source=source,
                        bias=tuple(brand.bias),
                    )
                )
        signals.sort(key=lambda s: s.span)
        return signals

    def brand_spans(self, value: str) -> List[Span]:
        """Spans of every brand alias in a field."""
        return [s.span for s in self.extract_field(value, TextField.NAME)]

    def get_extractor_name(self) -> str:
        return "brand"


class KeywordExtractor(SignalExtractor):
    """Match category keywords from the rule table.

    Brand names are masked first so "t-motor" or "t motor" never reads as
    the keyword "motor". Longer terms are matched first and claim their
    span; compatibility phrases therefore swallow the "prop" inside
    "propeller compatibility".
    """

    def __init__(self, table: RuleTable):
        self._brands = BrandExtractor(table)
        self._rules = sorted(
            table.keywords,
            key=lambda rule: (not rule.cross_reference, -len(rule.term)),
        )

    def extract_field(self, value: str, source: TextField) -> List[Signal]:
        masked = self._mask(value, self._brands.brand_spans(value))
        signals: List[Signal] = []
        claimed: List[Span] = []
        for rule in self._rules:
            for match in rule.regex.finditer(masked):
                span = match.span()
                if _overlaps(span, claimed):
                    continue
                claimed.append(span)
                signals.append(
                    Signal(
                        kind=SignalKind.KEYWORD,
                        name=rule.term,
                        value=match.group(0),
                        span=span,
                        source=source,
                        category=rule.category,
                        weight=0.0 if rule.cross_reference else rule.weight,
                        anchored=rule.anchored,
                        cross_reference=rule.cross_reference,
                        code=rule.code,
                    )
                )
        signals.sort(key=lambda s: s.span)
        return signals

    @staticmethod
    def _mask(value: str, spans: List[Span]) -> str:
        if not spans:
            return value
        chars = list(value)
        for start, end in spans:
            chars[start:end] = " " * (end - start)
        return "".join(chars)

    def get_extractor_name(self) -> str:
        return "keyword"


class StructuralExtractor(SignalExtractor):
    """Match accessory, mount and tray language."""

    def __init__(self, table: RuleTable):
        self._cues = sorted(
            table.structural_cues,
            key=lambda cue: -len(cue.term),
        )

    def extract_field(self, value: str, source: TextField) -> List[Signal]:
        signals: List[Signal] = []
        claimed: List[Span] = []
        for cue in self._cues:
            for match in cue.regex.finditer(value):
                span = match.span()
                if _overlaps(span, claimed):
                    continue
                claimed.append(span)
                signals.append(
                    Signal(
                        kind=SignalKind.STRUCTURAL,
                        name=cue.term,
                        value=match.group(0),
                        span=span,
                        source=source,
                    )
                )
        signals.sort(key=lambda s: s.span)
        return signals

    def get_extractor_name(self) -> str:
        return "structural"


# Registry of available extractors, in extraction order
EXTRACTOR_REGISTRY: Dict[str, Type[SignalExtractor]] = {
    "numeric": NumericSpecExtractor,
    "brand": BrandExtractor,
    "keyword": KeywordExtractor,
    "structural": StructuralExtractor,
}


def create_extractor(name: str, table: RuleTable) -> SignalExtractor:
    """Factory function to create an extractor by name.

    Args:
        name: Extractor name (e.g., "numeric", "brand")
        table: Rule table supplying brands, keywords and cues

    Returns:
        SignalExtractor instance

    Raises:
        ValueError: If extractor name is not registered
    """
    extractor_class = EXTRACTOR_REGISTRY.get(name)
    if extractor_class is None:
        available = ", ".join(EXTRACTOR_REGISTRY.keys())
        raise ValueError(f"Unknown extractor: {name}. Available: {available}")
    if extractor_class is NumericSpecExtractor:
        return extractor_class()
    return extractor_class(table)


def create_all_extractors(table: RuleTable) -> List[SignalExtractor]:
    """Create one instance of every registered extractor."""
    return [create_extractor(name, table) for name in EXTRACTOR_REGISTRY]


def extract_all_signals(
    text: NormalizedText,
    table: RuleTable,
    extractors: Optional[List[SignalExtractor]] = None,
) -> List[Signal]:
    """Run all extractors over a normalized listing.

    Args:
        text: Normalized listing text
        table: Rule table used when extractors are built here
        extractors: Pre-built extractors to reuse across calls

    Returns:
        Every signal from every extractor
    """
    if text.is_empty:
        return []
    extractors = extractors if extractors is not None else create_all_extractors(table)
    signals: List[Signal] = []
    for extractor in extractors:
        signals.extend(extractor.extract(text))
    logger.debug(
        "signals_extracted",
        total=len(signals),
        name_preview=text.name[:50],
    )
    return signals
