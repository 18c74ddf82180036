"""Drone-part classifier combining extractors, scorers and disambiguation.

Strategy:
1. Normalize name and description
2. Extract numeric, brand, keyword and structural signals
3. Score every category independently
4. Resolve: brand gating, penalties, accessory suppression, tie-break, floor
5. Map the winning score to a confidence

Example:
    classifier = ProductClassifier()
    result = classifier.classify("Tattu 1550mAh 4S 75C LiPo Battery")
    # result.category = Category.BATTERY
    # result.confidence = 99
    # result.method = ClassificationMethod.STRUCTURAL
"""
from typing import Dict, List, Optional

import structlog

from partsort.config import EngineSettings, get_settings
from partsort.models.classification import CategoryScore, ClassificationResult
from partsort.models.listing import Category, Listing
from partsort.models.signals import Signal
from partsort.rules.defaults import default_rule_table
from partsort.rules.table import RuleTable
from partsort.services.classification.aggregator import ConfidenceAggregator
from partsort.services.classification.disambiguator import Disambiguator
from partsort.services.classification.scorers import SignalSet, create_scorers
from partsort.services.extraction import create_all_extractors, extract_all_signals
from partsort.services.normalization import NormalizedText, TextNormalizer

logger = structlog.get_logger(__name__)


class ProductClassifier:
    """Rule-based drone-part classifier.

    Deterministic: the result depends only on the listing text, the rule
    table and the settings given at construction.

    Attributes:
        rule_table: Rule table in use
        settings: Thresholds in use
    """

    def __init__(
        self,
        rule_table: Optional[RuleTable] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.rule_table = rule_table or default_rule_table()
        self.settings = settings or get_settings()

        weights = self.rule_table.weights
        self._normalizer = TextNormalizer()
        self._extractors = create_all_extractors(self.rule_table)
        self._scorers = create_scorers(weights)
        self._aggregator = ConfidenceAggregator(weights.confidence_scale)
        self._disambiguator = Disambiguator(weights, self.settings, self._aggregator)
        self._log = logger.bind(component="ProductClassifier")

    def normalize(self, name: Optional[str], description: Optional[str] = None) -> NormalizedText:
        return self._normalizer.normalize(name, description)

    def extract_signals(self, text: NormalizedText) -> List[Signal]:
        return extract_all_signals(text, self.rule_table, self._extractors)

    def score(self, signals: SignalSet) -> Dict[Category, CategoryScore]:
        """Independent score of every known category."""
        return {scorer.category: scorer.score(signals) for scorer in self._scorers}

    def classify(self, name: Optional[str], description: Optional[str] = None) -> ClassificationResult:
        """Classify a listing from its name and description.

        Args:
            name: Listing name
            description: Listing description

        Returns:
            ClassificationResult; UNKNOWN results carry reasoning and warnings
        """
        text = self.normalize(name, description)
        version = self.rule_table.version
        if text.is_empty:
            self._log.debug("classification_skipped_empty_text")
            return self._aggregator.empty(version)

        signals = SignalSet(self.extract_signals(text), name=text.name)
        scores = self.score(signals)
        decision = self._disambiguator.resolve(scores, signals)

        specifications = {}
        if decision.category is not Category.UNKNOWN:
            scorer = next(s for s in self._scorers if s.category is decision.category)
            specifications = scorer.specifications(signals)

        result = self._aggregator.build(
            category=decision.category,
            method=decision.method,
            score=decision.score,
            extra_reasons=decision.extra_reasons,
            warnings=decision.warnings,
            specifications=specifications,
            rule_table_version=version,
        )

        self._log.debug(
            "classification_completed",
            product_name=text.name[:50],
            category=result.category.value,
            confidence=result.confidence,
            method=result.method.value,
        )
        return result

    def classify_listing(self, listing: Listing) -> ClassificationResult:
        return self.classify(listing.name, listing.description)
