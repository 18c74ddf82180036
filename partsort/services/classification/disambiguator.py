"""Cross-category resolution of independent scores.

The scorers never see each other. This module applies the rules that need
more than one category at a time: brand-bias gating, context penalties,
accessory suppression, the tie-break and the confidence floor.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from partsort.config import EngineSettings
from partsort.models.classification import (
    CategoryScore,
    ClassificationMethod,
    RuleClass,
    RuleHit,
)
from partsort.models.listing import Category
from partsort.models.reasons import ReasonCode, WarningCode
from partsort.rules.table import ScoringWeights
from partsort.services.classification.aggregator import ConfidenceAggregator
from partsort.services.classification.scorers import CATEGORY_PRIORITY, SignalSet

logger = structlog.get_logger(__name__)


@dataclass
class Decision:
    """Outcome of disambiguation, before it becomes a public result.

    Attributes:
        category: Winning category, or UNKNOWN
        method: Deciding method
        score: Score backing the confidence (the top score, even when the
            outcome is UNKNOWN)
        extra_reasons: Disambiguation codes appended after the winner's
        warnings: Warning codes collected along the way
    """
    category: Category
    method: ClassificationMethod
    score: Optional[CategoryScore] = None
    extra_reasons: List[ReasonCode] = field(default_factory=list)
    warnings: List[WarningCode] = field(default_factory=list)


class Disambiguator:
    """Resolves category scores into one decision.

    Steps run in a fixed order: brand-bias gating, negative rules,
    accessory suppression, ranking with tie-break, then the floor.
    Scores are modified in place; they belong to a single call.
    """

    def __init__(
        self,
        weights: ScoringWeights,
        settings: EngineSettings,
        aggregator: ConfidenceAggregator,
    ):
        self.weights = weights
        self.settings = settings
        self.aggregator = aggregator

    def resolve(self, scores: Dict[Category, CategoryScore], signals: SignalSet) -> Decision:
        warnings: List[WarningCode] = []
        if signals.cross_references:
            warnings.append(WarningCode.CROSS_REFERENCE_IGNORED)
        if signals.description_cues:
            warnings.append(WarningCode.ACCESSORY_IN_DESCRIPTION)

        self.gate_brand_bias(scores)
        self.apply_negative_rules(scores, signals)

        ranked = self.rank(scores)
        top = ranked[0]

        if self.is_accessory(scores, signals):
            self.suppress(scores)
            warnings.append(WarningCode.ACCESSORY_SUPPRESSED)
            return Decision(
                category=Category.UNKNOWN,
                method=ClassificationMethod.ACCESSORY_SUPPRESSED,
                score=top,
                extra_reasons=[ReasonCode.ACCESSORY_SUPPRESSION],
                warnings=warnings,
            )

        if top.raw_score <= 0:
            warnings.append(WarningCode.BELOW_MIN_CONFIDENCE)
            return Decision(
                category=Category.UNKNOWN,
                method=ClassificationMethod.BELOW_THRESHOLD,
                extra_reasons=[ReasonCode.NO_SIGNALS_MATCHED],
                warnings=warnings,
            )

        winner = top
        extra_reasons: List[ReasonCode] = []
        contenders = [
            s for s in ranked
            if s.raw_score > 0 and top.raw_score - s.raw_score <= self.settings.tie_margin
        ]
        if len(contenders) > 1:
            winner = max(contenders, key=self._tie_key)
            if winner is not top:
                extra_reasons.append(ReasonCode.TIE_BROKEN_BY_PRIORITY)
            if self.aggregator.confidence(contenders[1].raw_score) >= self.settings.min_confidence:
                warnings.append(WarningCode.NEAR_TIE)

        if self.aggregator.confidence(winner.raw_score) < self.settings.min_confidence:
            warnings.append(WarningCode.BELOW_MIN_CONFIDENCE)
            return Decision(
                category=Category.UNKNOWN,
                method=ClassificationMethod.BELOW_THRESHOLD,
                score=winner,
                extra_reasons=extra_reasons,
                warnings=warnings,
            )

        return Decision(
            category=winner.category,
            method=winner.strongest_class.to_method(),
            score=winner,
            extra_reasons=extra_reasons,
            warnings=warnings,
        )

    def gate_brand_bias(self, scores: Dict[Category, CategoryScore]) -> None:
        """Drop brand bias where another category's own evidence dominates."""
        non_brand = {c: s.non_brand_score for c, s in scores.items()}
        for category, score in scores.items():
            rival = max(
                (v for c, v in non_brand.items() if c is not category),
                default=0.0,
            )
            if rival >= self.weights.brand_dominance_floor and rival > non_brand[category]:
                if score.drop_brand_bias():
                    score.add(RuleHit(ReasonCode.BRAND_BIAS_DROPPED, RuleClass.NEGATIVE, 0.0))

    def apply_negative_rules(self, scores: Dict[Category, CategoryScore], signals: SignalSet) -> None:
        """Cross-category penalties driven by definitive evidence elsewhere."""
        w = self.weights
        frame = scores[Category.FRAME]
        battery = scores[Category.BATTERY]
        stack = scores[Category.STACK]
        prop = scores[Category.PROP]

        if frame.has(ReasonCode.WHEELBASE_SPEC) or frame.has(ReasonCode.FRAME_KIT):
            self._penalize(scores, [Category.PROP], ReasonCode.PROP_CROSS_REFERENCE_PENALTY,
                           w.prop_cross_reference_penalty)

        stack_brand = any(Category.STACK in s.bias for s in signals.brands)
        if stack.has_definitive or (stack_brand and signals.keywords(Category.STACK)):
            self._penalize(scores, [Category.MOTOR], ReasonCode.STACK_CONTEXT_PENALTY,
                           w.stack_context_penalty)

        if battery.has_definitive:
            self._penalize(scores, [Category.MOTOR, Category.STACK],
                           ReasonCode.BATTERY_CONTEXT_PENALTY, w.battery_context_penalty)

        if frame.has_definitive:
            self._penalize(scores, [Category.MOTOR, Category.STACK, Category.CAMERA, Category.PROP],
                           ReasonCode.FRAME_CONTEXT_PENALTY, w.frame_context_penalty)

        if prop.has_definitive and not frame.has_definitive:
            self._penalize(scores, [Category.MOTOR], ReasonCode.PROP_CONTEXT_PENALTY,
                           w.prop_context_penalty)

        if any(s.category is Category.CAMERA and s.in_name for s in signals.cross_references):
            self._penalize(scores, [Category.CAMERA], ReasonCode.ACTION_CAMERA_PENALTY,
                           w.action_camera_penalty)

    @staticmethod
    def _penalize(
        scores: Dict[Category, CategoryScore],
        categories: List[Category],
        code: ReasonCode,
        penalty: float,
    ) -> None:
        for category in categories:
            score = scores[category]
            if score.raw_score > 0:
                score.add(RuleHit(code, RuleClass.NEGATIVE, -penalty))

    def is_accessory(self, scores: Dict[Category, CategoryScore], signals: SignalSet) -> bool:
        """Whether the listing is an accessory for a part rather than the part.

        An accessory head phrase in the name ("Brushless Motor Mount for
        2207") suppresses even when an anchored phrase fired. Other name
        cues suppress unless an anchored phrase fired. Description cues
        suppress only when the name carries no part keyword at all.
        """
        anchored = any(s.has_anchored for s in scores.values())
        if signals.name_cues:
            return signals.accessory_head or not anchored
        if signals.description_cues and not anchored and not signals.name_keywords:
            return max(s.raw_score for s in scores.values()) > 0
        return False

    def suppress(self, scores: Dict[Category, CategoryScore]) -> None:
        """Cap every score just below the confidence floor."""
        ceiling = self.aggregator.raw_ceiling(max(self.settings.min_confidence - 1, 0))
        for score in scores.values():
            excess = score.raw_score - ceiling
            if excess > 0:
                score.add(RuleHit(ReasonCode.ACCESSORY_SUPPRESSION, RuleClass.NEGATIVE, -excess))

    @staticmethod
    def rank(scores: Dict[Category, CategoryScore]) -> List[CategoryScore]:
        """Scores by raw score, ties in category priority order."""
        return sorted(
            scores.values(),
            key=lambda s: (-s.raw_score, CATEGORY_PRIORITY.index(s.category)),
        )

    @staticmethod
    def _tie_key(score: CategoryScore):
        return (score.strongest_class.strength, -CATEGORY_PRIORITY.index(score.category))
