"""Duplicate candidate matching using fuzzy names and spec overlap.

Key Components:
    - MatcherStrategy: Abstract base class for duplicate matching algorithms
    - RapidFuzzDuplicateMatcher: Weighted mix of RapidFuzz name similarity,
      brand, category and numeric-spec agreement
    - fingerprint_listing: Builds a CatalogFingerprint from a listing
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Set

import structlog
from rapidfuzz import fuzz, utils

from partsort.config import EngineSettings, get_settings
from partsort.models.duplicates import CatalogFingerprint, DuplicateAction, DuplicateCandidate
from partsort.models.listing import Category, Listing
from partsort.services.classification import ProductClassifier, SignalSet

logger = structlog.get_logger(__name__)

# Numeric spec kinds that identify a specific SKU
SPEC_KINDS = ("kv", "mah", "cells", "current", "c_rating", "prop_size", "wheelbase", "stator", "tvl", "mcu")

# Similarity component weights, renormalized over the components available
COMPONENT_WEIGHTS: Dict[str, float] = {
    "name": 0.5,
    "brand": 0.2,
    "category": 0.15,
    "specs": 0.15,
}

CONFLICT_PENALTY = 0.5
NAME_REASON_THRESHOLD = 0.85


def fingerprint_listing(
    listing: Listing,
    classifier: ProductClassifier,
    candidate_id: str = "",
) -> CatalogFingerprint:
    """Build the matching fingerprint of a listing.

    Specs come from the listing name only; descriptions mention other parts.
    The classified category is used, falling back to the stored one when the
    classifier returns unknown.
    """
    text = classifier.normalize(listing.name, listing.description)
    signals = SignalSet(classifier.extract_signals(text))

    specs: Dict[str, Set[str]] = {}
    for kind in SPEC_KINDS:
        values = {s.value for s in signals.numeric(kind) if s.in_name}
        if values:
            specs[kind] = values

    brand = _canonical_brand(listing.brand, classifier) or next(
        (s.name for s in signals.brands if s.in_name), None
    )

    category = classifier.classify(listing.name, listing.description).category
    if category is Category.UNKNOWN and listing.existing_category is not None:
        category = listing.existing_category

    return CatalogFingerprint(
        candidate_id=candidate_id,
        name=text.name,
        brand=brand,
        category=category,
        specs={k: frozenset(v) for k, v in specs.items()},
    )


def _canonical_brand(raw: Optional[str], classifier: ProductClassifier) -> Optional[str]:
    if not raw:
        return None
    text = classifier.normalize(raw)
    rule = classifier.rule_table.brand(text.name)
    if rule is not None:
        return rule.key
    for signal in SignalSet(classifier.extract_signals(text)).brands:
        return signal.name
    return text.name or None


@dataclass
class SimilarityBreakdown:
    """Per-component similarity of two fingerprints.

    Attributes:
        components: Component name -> similarity in 0..1, for the
            components both fingerprints support
        conflicts: Spec kinds whose values are disjoint
    """
    components: Dict[str, float] = field(default_factory=dict)
    conflicts: List[str] = field(default_factory=list)

    @property
    def similarity(self) -> float:
        total_weight = sum(COMPONENT_WEIGHTS[name] for name in self.components)
        if total_weight == 0:
            return 0.0
        value = sum(COMPONENT_WEIGHTS[name] * v for name, v in self.components.items()) / total_weight
        if self.conflicts:
            value *= CONFLICT_PENALTY
        return max(0.0, min(1.0, value))

    @property
    def reasons(self) -> List[str]:
        reasons = []
        if self.components.get("name", 0.0) >= NAME_REASON_THRESHOLD:
            reasons.append("name_similarity")
        if self.components.get("brand") == 1.0:
            reasons.append("same_brand")
        if self.components.get("category") == 1.0:
            reasons.append("same_category")
        if self.components.get("specs", 0.0) > 0:
            reasons.append("matching_specs")
        reasons.extend(f"conflicting_specs:{kind}" for kind in self.conflicts)
        return reasons


class MatcherStrategy(ABC):
    """Abstract base class for duplicate matching strategies.

    All implementations must honor the contract:
        - find_duplicates() returns candidates sorted by similarity (descending)
        - Similarity is normalized to the 0..1 range
        - Candidates below the review threshold are not returned
    """

    @abstractmethod
    def find_duplicates(
        self,
        fingerprint: CatalogFingerprint,
        candidate_pool: Sequence[CatalogFingerprint],
    ) -> List[DuplicateCandidate]:
        """Find catalog entries that are likely the same product.

        Args:
            fingerprint: Fingerprint of the listing being ingested
            candidate_pool: Fingerprints of existing catalog entries

        Returns:
            Ranked duplicate candidates
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get the name of this matching strategy."""
        pass


class RapidFuzzDuplicateMatcher(MatcherStrategy):
    """Duplicate matcher using RapidFuzz token_set_ratio plus spec agreement.

    token_set_ratio ignores word order and extra words, so "Badass 2 2207.5
    1900KV" and "2207.5 Badass 2 Motor 1900KV" compare as equal; the spec
    component then separates true duplicates from sibling variants.

    Attributes:
        settings: Thresholds (auto-merge, review, max candidates)
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()
        self._log = logger.bind(matcher="RapidFuzzDuplicateMatcher")

    def get_strategy_name(self) -> str:
        return "rapidfuzz_token_set"

    def compare(self, left: CatalogFingerprint, right: CatalogFingerprint) -> SimilarityBreakdown:
        breakdown = SimilarityBreakdown()
        breakdown.components["name"] = (
            fuzz.token_set_ratio(left.name, right.name, processor=utils.default_process) / 100
        )

        if left.brand and right.brand:
            breakdown.components["brand"] = 1.0 if left.brand == right.brand else 0.0

        if left.category is not Category.UNKNOWN and right.category is not Category.UNKNOWN:
            breakdown.components["category"] = 1.0 if left.category is right.category else 0.0

        shared = sorted(set(left.specs) & set(right.specs))
        if shared:
            matching = 0
            for kind in shared:
                if self._overlap(left.specs[kind], right.specs[kind]):
                    matching += 1
                else:
                    breakdown.conflicts.append(kind)
            breakdown.components["specs"] = matching / len(shared)

        return breakdown

    @staticmethod
    def _overlap(a: FrozenSet[str], b: FrozenSet[str]) -> bool:
        return bool(a & b)

    def find_duplicates(
        self,
        fingerprint: CatalogFingerprint,
        candidate_pool: Sequence[CatalogFingerprint],
    ) -> List[DuplicateCandidate]:
        if not candidate_pool:
            self._log.debug("no_candidates_to_match", name=fingerprint.name[:50])
            return []

        candidates: List[DuplicateCandidate] = []
        for other in candidate_pool:
            if other.candidate_id and other.candidate_id == fingerprint.candidate_id:
                continue
            breakdown = self.compare(fingerprint, other)
            similarity = round(breakdown.similarity, 4)
            if similarity < self.settings.review_threshold:
                continue

            if similarity >= self.settings.auto_merge_threshold and not breakdown.conflicts:
                action = DuplicateAction.AUTO_MERGE
            else:
                action = DuplicateAction.NEEDS_REVIEW

            candidates.append(
                DuplicateCandidate(
                    candidate_id=other.candidate_id,
                    similarity=similarity,
                    action=action,
                    reasons=breakdown.reasons,
                )
            )

        candidates.sort(key=lambda c: (-c.similarity, c.candidate_id))
        candidates = candidates[: self.settings.max_candidates]

        self._log.debug(
            "duplicates_found",
            name=fingerprint.name[:50],
            pool_size=len(candidate_pool),
            candidates=len(candidates),
            auto_merge=sum(1 for c in candidates if c.action is DuplicateAction.AUTO_MERGE),
        )
        return candidates
