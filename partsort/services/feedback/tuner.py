"""Offline keyword weight tuning from human feedback.

Runs outside the classification path. For each feedback entry the
keywords that fired on the listing are nudged: terms pointing at the human
category are boosted, terms pointing elsewhere are damped. The result is a
new rule table; publish it with RuleTableStore.swap().
"""
from collections import defaultdict
from typing import Dict, Iterable, Mapping

import structlog

from partsort.models.feedback import FeedbackEntry
from partsort.models.listing import Listing
from partsort.rules.table import RuleTable
from partsort.services.extraction import KeywordExtractor
from partsort.services.normalization import TextNormalizer

logger = structlog.get_logger(__name__)


class WeightTuner:
    """Multiplicative keyword weight adjustment.

    Attributes:
        learning_rate: Relative change per feedback entry
        min_weight: Lower clamp for tuned weights
        max_weight: Upper clamp for tuned weights
    """

    def __init__(self, learning_rate: float = 0.05, min_weight: float = 1.0, max_weight: float = 100.0):
        if not 0 < learning_rate < 1:
            raise ValueError("learning_rate must be between 0 and 1")
        self.learning_rate = learning_rate
        self.min_weight = min_weight
        self.max_weight = max_weight
        self._normalizer = TextNormalizer()

    def tune(
        self,
        table: RuleTable,
        entries: Iterable[FeedbackEntry],
        listings: Mapping[str, Listing],
    ) -> RuleTable:
        """Return a tuned copy of ``table``.

        Args:
            table: Current rule table
            entries: Feedback entries; order does not matter
            listings: Listing fingerprint -> listing

        Returns:
            New RuleTable with version + 1, or ``table`` itself when no
            entry could be applied
        """
        extractor = KeywordExtractor(table)
        factors: Dict[str, float] = defaultdict(lambda: 1.0)
        applied = 0

        for entry in sorted(entries, key=lambda e: (e.timestamp, e.listing_fingerprint)):
            listing = listings.get(entry.listing_fingerprint)
            if listing is None:
                continue
            applied += 1
            text = self._normalizer.normalize(listing.name, listing.description)
            fired = {
                (s.name, s.category)
                for s in extractor.extract(text)
                if not s.cross_reference
            }
            for term, category in fired:
                if category is entry.human_assigned_category:
                    factors[term] *= 1 + self.learning_rate
                else:
                    factors[term] *= 1 - self.learning_rate

        if not applied:
            logger.info("weights_tuning_skipped", reason="no matching listings")
            return table

        keywords = []
        for rule in table.keywords:
            factor = factors.get(rule.term)
            if factor is None or rule.cross_reference:
                keywords.append(rule)
                continue
            weight = min(self.max_weight, max(self.min_weight, rule.weight * factor))
            keywords.append(rule.model_copy(update={"weight": round(weight, 3)}))

        tuned = table.with_keywords(keywords)
        logger.info(
            "weights_tuned",
            entries_applied=applied,
            terms_adjusted=len(factors),
            version=tuned.version,
        )
        return tuned
