"""Classification scoring records and the public result model."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode, WarningCode


class ClassificationMethod(str, Enum):
    """Which rule class decided the outcome."""
    STRUCTURAL = "structural"
    KEYWORD = "keyword"
    BRAND_BIAS = "brand-bias"
    ACCESSORY_SUPPRESSED = "accessory-suppressed"
    BELOW_THRESHOLD = "below-threshold"


class RuleClass(str, Enum):
    """Rule classes in evaluation order."""
    STRUCTURAL = "structural"
    KEYWORD = "keyword"
    BRAND_BIAS = "brand_bias"
    NEGATIVE = "negative"

    @property
    def strength(self) -> int:
        """Tie-break rank; higher wins."""
        return _RULE_CLASS_STRENGTH[self]

    def to_method(self) -> ClassificationMethod:
        if self is RuleClass.STRUCTURAL:
            return ClassificationMethod.STRUCTURAL
        if self is RuleClass.KEYWORD:
            return ClassificationMethod.KEYWORD
        return ClassificationMethod.BRAND_BIAS


_RULE_CLASS_STRENGTH = {
    RuleClass.STRUCTURAL: 3,
    RuleClass.KEYWORD: 2,
    RuleClass.BRAND_BIAS: 1,
    RuleClass.NEGATIVE: 0,
}


@dataclass(frozen=True)
class RuleHit:
    """A single fired rule and its contribution to a category score.

    Attributes:
        code: Reason code reported to callers
        rule_class: Class of the rule that fired
        weight: Signed contribution to the raw score
        anchored: Self-describing phrase evidence; survives accessory
            suppression
    """
    code: ReasonCode
    rule_class: RuleClass
    weight: float
    anchored: bool = False


@dataclass
class CategoryScore:
    """Score of one category for one classification attempt.

    Not persisted; discarded after aggregation.
    """
    category: Category
    hits: List[RuleHit] = field(default_factory=list)

    @property
    def raw_score(self) -> float:
        return max(0.0, sum(h.weight for h in self.hits))

    @property
    def fired_reasons(self) -> List[ReasonCode]:
        """Reason codes in firing order, without repeats."""
        seen: List[ReasonCode] = []
        for hit in self.hits:
            if hit.code not in seen:
                seen.append(hit.code)
        return seen

    @property
    def non_brand_score(self) -> float:
        return max(
            0.0,
            sum(h.weight for h in self.hits if h.rule_class is not RuleClass.BRAND_BIAS),
        )

    @property
    def has_definitive(self) -> bool:
        return any(
            h.rule_class is RuleClass.STRUCTURAL and h.weight > 0 for h in self.hits
        )

    @property
    def has_anchored(self) -> bool:
        return any(h.anchored and h.weight > 0 for h in self.hits)

    @property
    def strongest_class(self) -> RuleClass:
        """Strongest positive rule class; NEGATIVE when nothing positive fired."""
        positive = [h.rule_class for h in self.hits if h.weight > 0]
        if not positive:
            return RuleClass.NEGATIVE
        return max(positive, key=lambda rc: rc.strength)

    def has(self, code: ReasonCode) -> bool:
        return any(h.code is code and h.weight > 0 for h in self.hits)

    def add(self, hit: RuleHit) -> None:
        self.hits.append(hit)

    def drop_brand_bias(self) -> bool:
        """Remove brand-bias hits; returns True when any were removed."""
        kept = [h for h in self.hits if h.rule_class is not RuleClass.BRAND_BIAS]
        removed = len(kept) != len(self.hits)
        self.hits = kept
        return removed


class ClassificationResult(BaseModel):
    """Outcome of classifying one listing.

    Confidence and reasoning are always populated, including for UNKNOWN;
    warnings explain weak or unknown outcomes.
    """

    category: Category
    confidence: int = Field(..., ge=0, le=100)
    method: ClassificationMethod
    reasoning: List[ReasonCode] = Field(..., min_length=1)
    warnings: List[WarningCode] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)
    rule_table_version: int = 1

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "category": "battery",
                "confidence": 99,
                "method": "structural",
                "reasoning": ["cells_with_capacity", "battery_keyword"],
                "warnings": [],
                "specifications": {"capacity_mah": 1550, "cells": 4},
            }
        },
    )

    @property
    def is_unknown(self) -> bool:
        return self.category is Category.UNKNOWN

    def is_confident(self, threshold: int) -> bool:
        """Returns True if confidence clears the given threshold."""
        return not self.is_unknown and self.confidence >= threshold
