"""Detection of listings that bundle several SKUs into one entry.

Vendors often list "1400KV/1900KV/2400KV" or "1300mAh, 1500mAh" under a
single product. The detector finds such enumerations in the listing name
and proposes one child listing per value. It only proposes; persisting the
split is the caller's job.
"""
import html
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

import structlog

from partsort.models.listing import Category, Listing
from partsort.models.variants import SplitPlan, VariantGroup, VariantType

logger = structlog.get_logger(__name__)

# Bundling punctuation between enumerated values
SEPARATOR = r"\s*(?:/|,|\||\bor\b)\s*"


@dataclass(frozen=True)
class VariantPattern:
    """One enumerable spec.

    Attributes:
        variant_type: Spec dimension
        value: Regex for a single value including its unit
        unit: Display unit
        unit_pattern: Regex for the unit alone, enabling the unit-once
            form "1400/1900/2400KV"; None when values carry no unit
        categories: Categories this pattern belongs to
    """
    variant_type: VariantType
    value: str
    unit: str
    unit_pattern: Optional[str]
    categories: Tuple[Category, ...]

    @property
    def enumeration(self) -> Pattern[str]:
        return re.compile(
            rf"(?<![\w.])(?:{self.value})(?:{SEPARATOR}(?:{self.value}))+(?![\w.])",
            re.IGNORECASE,
        )

    @property
    def unit_once(self) -> Optional[Pattern[str]]:
        if self.unit_pattern is None:
            return None
        number = r"\d+(?:\.\d+)?"
        return re.compile(
            rf"(?<![\w.]){number}(?:{SEPARATOR}{number})+\s?(?:{self.unit_pattern})(?![\w.])",
            re.IGNORECASE,
        )


VARIANT_PATTERNS: List[VariantPattern] = [
    VariantPattern(VariantType.KV, r"\d+(?:\.\d+)?\s?kv", "KV", "kv", (Category.MOTOR,)),
    VariantPattern(VariantType.CAPACITY, r"\d+\s?mah", "mAh", "mah", (Category.BATTERY,)),
    VariantPattern(VariantType.CELLS, r"\d{1,2}s", "S", "s", (Category.BATTERY,)),
    VariantPattern(VariantType.CURRENT, r"\d+(?:\.\d+)?a", "A", "a", (Category.STACK,)),
    VariantPattern(
        VariantType.SIZE,
        r"\d+(?:\.\d+)?\s?x\s?\d+(?:\.\d+)?\s?x\s?\d+",
        "",
        None,
        (Category.PROP,),
    ),
    VariantPattern(VariantType.SIZE, r"\d+\s?mm", "mm", "mm", (Category.FRAME,)),
]

_VALUE_SPLIT = re.compile(SEPARATOR, re.IGNORECASE)
_UNIT_SUFFIX = re.compile(r"^(.*?\d)\s?([a-z]+)$", re.IGNORECASE)
_EMPTY_PARENS = re.compile(r"\(\s*\)|\[\s*\]")
_TRAILING = re.compile(r"[\s\-–—|,/:(]+$")
_LEADING = re.compile(r"^[\s\-–—|,/:)]+")


def _clean_value(value: str) -> str:
    return re.sub(r"\s+", "", value).lower()


@dataclass
class VariantStats:
    """Summary of bundled listings across a set of names."""
    total_products: int = 0
    products_with_variants: int = 0
    detected: List[Tuple[str, int, VariantType]] = field(default_factory=list)


class VariantDetector:
    """Finds enumerated spec values in listing names."""

    def __init__(self, patterns: Optional[Sequence[VariantPattern]] = None):
        self.patterns = list(patterns or VARIANT_PATTERNS)
        self._log = logger.bind(component="VariantDetector")

    def _ordered(self, category: Optional[Category]) -> List[VariantPattern]:
        """Patterns of the given category first, the rest in table order."""
        if category is None or category is Category.UNKNOWN:
            return self.patterns
        preferred = [p for p in self.patterns if category in p.categories]
        others = [p for p in self.patterns if category not in p.categories]
        return preferred + others

    def find_group(self, name: str, category: Optional[Category] = None) -> Optional[VariantGroup]:
        """Return the first enumeration found in a name, if any."""
        if not name:
            return None
        text = html.unescape(name)

        for pattern in self._ordered(category):
            found = self._match(text, pattern)
            if found is None:
                continue
            span, values = found
            distinct = list(dict.fromkeys(values))
            if len(distinct) < 2:
                continue
            return VariantGroup(
                base_name=self._base_name(text, span),
                variant_type=pattern.variant_type,
                values=distinct,
                unit=pattern.unit,
            )
        return None

    def _match(self, text: str, pattern: VariantPattern) -> Optional[Tuple[Tuple[int, int], List[str]]]:
        match = pattern.enumeration.search(text)
        if match:
            values = [_clean_value(v) for v in _VALUE_SPLIT.split(match.group(0)) if v.strip()]
            return match.span(), values

        unit_once = pattern.unit_once
        if unit_once is not None:
            match = unit_once.search(text)
            if match:
                suffix = _UNIT_SUFFIX.match(_clean_value(match.group(0)))
                unit = suffix.group(2) if suffix else ""
                numbers = [_clean_value(v) for v in _VALUE_SPLIT.split(match.group(0)) if v.strip()]
                values = [n if n.endswith(unit) else f"{n}{unit}" for n in numbers]
                return match.span(), values
        return None

    @staticmethod
    def _base_name(text: str, span: Tuple[int, int]) -> str:
        start, end = span
        head = _TRAILING.sub("", text[:start])
        tail = _LEADING.sub("", text[end:])
        base = f"{head} {tail}" if tail else head
        base = _EMPTY_PARENS.sub("", base)
        base = re.sub(r"\s+", " ", base)
        return _TRAILING.sub("", base).strip()

    def detect_variants(
        self,
        name: str,
        description: str = "",
        category: Optional[Category] = None,
    ) -> Optional[SplitPlan]:
        """Propose a split for a bundled listing.

        Args:
            name: Listing name
            description: Listing description
            category: Classified category; its patterns are tried first

        Returns:
            SplitPlan with one child per value, or None when the name
            enumerates fewer than two distinct values
        """
        listing = Listing(name=name, description=description, existing_category=category)
        return self.split_listing(listing, category)

    def split_listing(self, listing: Listing, category: Optional[Category] = None) -> Optional[SplitPlan]:
        """Propose a split for a full listing, inheriting its other fields."""
        category = category or listing.existing_category
        group = self.find_group(listing.name, category)
        if group is None:
            return None

        children = [self._child(listing, group, value, category) for value in group.values]
        self._log.info(
            "variants_detected",
            original_name=listing.name[:80],
            variant_type=group.variant_type.value,
            variant_count=len(children),
        )
        return SplitPlan(original_listing=listing, group=group, children=children)

    @staticmethod
    def _child(
        listing: Listing,
        group: VariantGroup,
        value: str,
        category: Optional[Category],
    ) -> Listing:
        label = value.upper()
        description = listing.description
        note = f"({label} variant)"
        if label.lower() not in description.lower():
            description = f"{description} {note}".strip()

        specifications = dict(listing.specifications)
        specifications.update(
            variant=label,
            variant_type=group.variant_type.value,
            original_name=listing.name,
        )
        known = category if category is not None and category is not Category.UNKNOWN else None

        return listing.model_copy(
            update={
                "name": f"{group.base_name} - {label}",
                "description": description,
                "existing_category": known or listing.existing_category,
                "specifications": specifications,
            }
        )

    def has_likely_variants(self, name: str) -> bool:
        """Cheap check for enumerated values in a name."""
        return self.find_group(name) is not None

    def variant_stats(self, names: Iterable[str]) -> VariantStats:
        stats = VariantStats()
        for name in names:
            stats.total_products += 1
            group = self.find_group(name)
            if group is not None:
                stats.products_with_variants += 1
                stats.detected.append((name, len(group.values), group.variant_type))
        return stats
