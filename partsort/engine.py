"""Public engine facade.

Example:
    engine = create_engine()
    result = engine.classify("Tattu 1550mAh 4S 75C LiPo Battery")
    plan = engine.detect_variants(
        "Badass 2 - 2207.5 Motor - 1400KV/1900KV/2400KV", "", Category.MOTOR
    )
"""
from typing import List, Optional, Protocol, Sequence, runtime_checkable

import structlog

from partsort.config import EngineSettings, get_settings
from partsort.models.classification import ClassificationResult
from partsort.models.duplicates import CatalogFingerprint, DuplicateCandidate
from partsort.models.listing import Category, Listing
from partsort.models.variants import SplitPlan
from partsort.rules.store import RuleTableStore
from partsort.rules.table import RuleTable
from partsort.services.classification import ProductClassifier
from partsort.services.matching import RapidFuzzDuplicateMatcher, fingerprint_listing
from partsort.services.variants import VariantDetector

logger = structlog.get_logger(__name__)


@runtime_checkable
class ClassificationEngine(Protocol):
    """What ingest and resort callers depend on."""

    def classify(self, name: str, description: str = "") -> ClassificationResult:
        ...

    def detect_variants(
        self,
        name: str,
        description: str,
        category: Optional[Category],
    ) -> Optional[SplitPlan]:
        ...

    def find_duplicates(
        self,
        listing: Listing,
        candidate_pool: Sequence[CatalogFingerprint],
    ) -> List[DuplicateCandidate]:
        ...


class PartClassificationEngine:
    """Rule-based implementation of ClassificationEngine.

    Holds one immutable rule table for its lifetime; build a new engine
    (or use from_store) to pick up a swapped table.
    """

    def __init__(
        self,
        rule_table: Optional[RuleTable] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.settings.check_consistency()
        self.classifier = ProductClassifier(rule_table, self.settings)
        self.variants = VariantDetector()
        self.matcher = RapidFuzzDuplicateMatcher(self.settings)

    @classmethod
    def from_store(
        cls,
        store: RuleTableStore,
        settings: Optional[EngineSettings] = None,
    ) -> "PartClassificationEngine":
        """Engine bound to the store's current snapshot."""
        return cls(store.snapshot(), settings)

    @property
    def rule_table(self) -> RuleTable:
        return self.classifier.rule_table

    def classify(self, name: str, description: str = "") -> ClassificationResult:
        return self.classifier.classify(name, description)

    def classify_listing(self, listing: Listing) -> ClassificationResult:
        return self.classifier.classify_listing(listing)

    def detect_variants(
        self,
        name: str,
        description: str = "",
        category: Optional[Category] = None,
    ) -> Optional[SplitPlan]:
        return self.variants.detect_variants(name, description, category)

    def split_listing(self, listing: Listing, category: Optional[Category] = None) -> Optional[SplitPlan]:
        return self.variants.split_listing(listing, category)

    def fingerprint(self, listing: Listing, candidate_id: str = "") -> CatalogFingerprint:
        return fingerprint_listing(listing, self.classifier, candidate_id)

    def find_duplicates(
        self,
        listing: Listing,
        candidate_pool: Sequence[CatalogFingerprint],
    ) -> List[DuplicateCandidate]:
        return self.matcher.find_duplicates(self.fingerprint(listing), candidate_pool)


def create_engine(settings: Optional[EngineSettings] = None) -> PartClassificationEngine:
    """Build an engine from settings, loading PARTSORT_RULE_TABLE_PATH if set."""
    settings = settings or get_settings()
    store = RuleTableStore.from_settings(settings)
    engine = PartClassificationEngine.from_store(store, settings)
    logger.info(
        "engine_created",
        rule_table_version=engine.rule_table.version,
        environment=settings.environment,
    )
    return engine
