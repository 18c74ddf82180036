"""Signal records produced by the extractors.

Signals are created tens of thousands of times per resort run, so they are
plain frozen dataclasses rather than pydantic models.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode


class SignalKind(str, Enum):
    """Kind of evidence a signal carries."""
    NUMERIC_SPEC = "numeric_spec"
    BRAND = "brand"
    KEYWORD = "keyword"
    STRUCTURAL = "structural"


class TextField(str, Enum):
    """Listing field a signal was found in."""
    NAME = "name"
    DESCRIPTION = "description"


@dataclass(frozen=True)
class Signal:
    """One unit of evidence extracted from a listing.

    Attributes:
        kind: Evidence kind
        name: Spec key ("kv", "wheelbase"), canonical brand, keyword term
            or structural cue
        value: Matched value (numeric part for specs, matched text otherwise)
        span: (start, end) offsets inside the normalized field
        source: Field the signal came from
        category: Category the evidence points at, when it points at one
        weight: Rule-table weight for keyword signals
        bias: Advisory product-line categories for brand signals
        anchored: Keyword is a self-describing phrase ("frame kit")
        cross_reference: Keyword describes compatibility with another part
        code: Reason code reported when an anchored keyword fires
    """
    kind: SignalKind
    name: str
    value: str
    span: Tuple[int, int]
    source: TextField = TextField.NAME
    category: Optional[Category] = None
    weight: float = 0.0
    bias: Tuple[Category, ...] = ()
    anchored: bool = False
    cross_reference: bool = False
    code: Optional[ReasonCode] = None

    @property
    def in_name(self) -> bool:
        return self.source is TextField.NAME
