"""Immutable rule table: brands, keywords, accessory cues and weights.

A RuleTable is a read-only value shared by every classification call of a
batch. Tuning produces a new table; nothing mutates one in place.
"""
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Pattern, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from partsort.errors import RuleTableError
from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1024)
def compile_term(pattern: str) -> Pattern[str]:
    """Compile a term pattern bounded so it never matches inside a word.

    Hyphens count as word characters, so "motor" does not match the brand
    "t-motor".
    """
    return re.compile(rf"(?<![\w-])(?:{pattern})(?![\w-])")


def _check_pattern(pattern: str) -> str:
    try:
        compile_term(pattern)
    except re.error as e:
        raise ValueError(f"invalid pattern {pattern!r}: {e}") from e
    return pattern


class BrandRule(BaseModel):
    """A brand and the product lines it is known for.

    Attributes:
        key: Canonical brand key ("t-motor")
        aliases: Lower-case spellings found in listings
        bias: Categories the brand makes; advisory only
    """

    key: str = Field(..., min_length=1)
    aliases: List[str] = Field(..., min_length=1)
    bias: List[Category] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @field_validator("aliases")
    @classmethod
    def validate_aliases(cls, v: List[str]) -> List[str]:
        aliases = [a.lower().strip() for a in v]
        if not all(aliases):
            raise ValueError("aliases must not be blank")
        return aliases


class KeywordRule(BaseModel):
    """A category-indicative term.

    Attributes:
        term: Human-readable term, also the default pattern
        category: Category the term points at
        weight: Contribution when found in the listing name
        pattern: Regex overriding the escaped term
        anchored: Self-describing phrase; fires as a definitive rule and
            survives accessory suppression
        cross_reference: Compatibility mention; recognised but never scored
        code: Reason code for anchored terms
    """

    term: str = Field(..., min_length=1)
    category: Category
    weight: float = Field(default=0.0, ge=0)
    pattern: Optional[str] = None
    anchored: bool = False
    cross_reference: bool = False
    code: Optional[ReasonCode] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        return _check_pattern(v) if v is not None else None

    @property
    def regex(self) -> Pattern[str]:
        return compile_term(self.pattern or re.escape(self.term))


class StructuralCue(BaseModel):
    """Accessory/mount/tray language that suppresses classification."""

    term: str = Field(..., min_length=1)
    pattern: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: Optional[str]) -> Optional[str]:
        return _check_pattern(v) if v is not None else None

    @property
    def regex(self) -> Pattern[str]:
        return compile_term(self.pattern or re.escape(self.term))


class ScoringWeights(BaseModel):
    """Numeric knobs of the scorers, disambiguator and aggregator."""

    # Evidence shaping
    description_multiplier: float = Field(default=0.5, ge=0, le=1)
    repeat_bonus: float = Field(default=0.1, ge=0, le=1)
    max_repeats: int = Field(default=2, ge=0)

    # Definitive structural rules
    wheelbase: float = 70.0
    cells_with_capacity: float = 65.0
    kv_rating: float = 45.0
    prop_dimensions: float = 50.0
    tvl_resolution: float = 45.0
    flight_controller_with_mcu: float = 55.0
    esc_with_current: float = 40.0

    # Supporting spec rules
    capacity: float = 15.0
    cell_count: float = 10.0
    c_rating: float = 10.0
    stator: float = 15.0
    mcu: float = 15.0

    # Brand bias
    brand_bias_exclusive: float = 25.0
    brand_bias_shared: float = 10.0
    brand_dominance_floor: float = 30.0

    # Negative rules
    prop_cross_reference_penalty: float = 80.0
    stack_context_penalty: float = 35.0
    battery_context_penalty: float = 30.0
    frame_context_penalty: float = 30.0
    prop_context_penalty: float = 30.0
    action_camera_penalty: float = 80.0

    # Aggregation
    confidence_scale: float = Field(default=35.0, gt=0)

    model_config = ConfigDict(frozen=True)


class RuleTable(BaseModel):
    """Brand, keyword, cue and weight tables used by one engine instance."""

    version: int = Field(default=1, ge=1)
    brands: List[BrandRule] = Field(default_factory=list)
    keywords: List[KeywordRule] = Field(default_factory=list)
    structural_cues: List[StructuralCue] = Field(default_factory=list)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_categories(self) -> "RuleTable":
        """Rules must point at real categories."""
        for rule in self.keywords:
            if rule.category is Category.UNKNOWN:
                raise ValueError(f"keyword {rule.term!r} points at unknown")
            if rule.anchored and rule.code is None:
                raise ValueError(f"anchored keyword {rule.term!r} needs a code")
        for brand in self.brands:
            if Category.UNKNOWN in brand.bias:
                raise ValueError(f"brand {brand.key!r} biased towards unknown")
        return self

    def brand(self, key: str) -> Optional[BrandRule]:
        for rule in self.brands:
            if rule.key == key:
                return rule
        return None

    def with_keywords(self, keywords: List[KeywordRule]) -> "RuleTable":
        """New table with replaced keyword rules and a bumped version."""
        return self.model_copy(update={"keywords": keywords, "version": self.version + 1})


def build_rule_table(data: dict) -> RuleTable:
    """Validate a rule table from plain data.

    Raises:
        RuleTableError: If the data does not describe a valid table
    """
    try:
        return RuleTable.model_validate(data)
    except ValidationError as e:
        raise RuleTableError(
            "Invalid rule table",
            details={"errors": e.errors(include_url=False)},
        ) from e


def load_rule_table(path: Union[str, Path]) -> RuleTable:
    """Load a rule table from a JSON file.

    Raises:
        RuleTableError: If the file is unreadable or invalid
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleTableError(
            f"Cannot read rule table: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e

    try:
        table = RuleTable.model_validate_json(raw)
    except ValidationError as e:
        raise RuleTableError(
            f"Invalid rule table: {path}",
            details={"path": str(path), "errors": e.errors(include_url=False)},
        ) from e

    logger.info(
        "rule_table_loaded",
        path=str(path),
        version=table.version,
        brands=len(table.brands),
        keywords=len(table.keywords),
    )
    return table
