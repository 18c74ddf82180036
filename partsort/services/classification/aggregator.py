"""Maps raw category scores to a bounded confidence and assembles results."""
import math
from typing import Any, Dict, List, Optional

from partsort.models.classification import (
    CategoryScore,
    ClassificationMethod,
    ClassificationResult,
)
from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode, WarningCode


class ConfidenceAggregator:
    """Saturating score-to-confidence mapping.

    confidence = round(100 * (1 - exp(-raw / scale)))

    Monotonic in the raw score and bounded to 0..100, so piling up evidence
    approaches but never exceeds 100.
    """

    def __init__(self, scale: float):
        self.scale = scale

    def confidence(self, raw_score: float) -> int:
        if raw_score <= 0:
            return 0
        return max(0, min(100, round(100 * (1 - math.exp(-raw_score / self.scale)))))

    def raw_ceiling(self, confidence: int) -> float:
        """Largest raw score whose confidence does not exceed ``confidence``."""
        if confidence <= 0:
            return 0.0
        if confidence >= 100:
            return math.inf
        # Half a point below, so rounding stays at or under the target
        return -self.scale * math.log(1 - (confidence + 0.49) / 100)

    def build(
        self,
        category: Category,
        method: ClassificationMethod,
        score: Optional[CategoryScore],
        extra_reasons: List[ReasonCode],
        warnings: List[WarningCode],
        specifications: Optional[Dict[str, Any]] = None,
        rule_table_version: int = 1,
    ) -> ClassificationResult:
        """Assemble a result.

        Reasoning is the backing score's reason codes in firing order
        followed by the disambiguation codes; it is never empty.
        """
        reasoning: List[ReasonCode] = list(score.fired_reasons) if score else []
        for code in extra_reasons:
            if code not in reasoning:
                reasoning.append(code)
        if not reasoning:
            reasoning = [ReasonCode.NO_SIGNALS_MATCHED]

        if category is Category.UNKNOWN and not warnings:
            warnings = [WarningCode.BELOW_MIN_CONFIDENCE]

        return ClassificationResult(
            category=category,
            confidence=self.confidence(score.raw_score) if score else 0,
            method=method,
            reasoning=reasoning,
            warnings=list(dict.fromkeys(warnings)),
            specifications=specifications or {},
            rule_table_version=rule_table_version,
        )

    def empty(self, rule_table_version: int = 1) -> ClassificationResult:
        """Result for a listing with no extractable text."""
        return ClassificationResult(
            category=Category.UNKNOWN,
            confidence=0,
            method=ClassificationMethod.BELOW_THRESHOLD,
            reasoning=[ReasonCode.NO_EXTRACTABLE_TEXT],
            warnings=[WarningCode.NO_EXTRACTABLE_TEXT],
            rule_table_version=rule_table_version,
        )
