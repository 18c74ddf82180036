"""Bulk resort of existing catalog listings.

Key Functions:
    - ResortService.resort: Reclassify a batch and return the change set
    - ResortService.resort_by_brand / resort_by_category: Filtered runs
    - ResortService.generate_report: Category health without changes

The service never writes anything. It returns a ResortSummary whose
``changes`` list is the diff the caller persists.
"""
import asyncio
from collections import Counter, defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple, Union

import structlog

from partsort.config import EngineSettings, ResortPolicy, get_settings
from partsort.models.classification import ClassificationResult
from partsort.models.listing import Category
from partsort.models.resort import (
    Misclassification,
    ResortChange,
    ResortError,
    ResortItem,
    ResortReport,
    ResortSummary,
)
from partsort.rules.store import RuleTableStore
from partsort.services.classification import ProductClassifier

logger = structlog.get_logger(__name__)

Outcome = Union[Tuple[ResortItem, ClassificationResult], ResortError, None]


class ResortService:
    """Reclassifies catalog listings on a bounded worker pool.

    Each run pins one rule table snapshot, so a table swapped in mid-run
    only affects later runs.

    Classification is pure-Python regex work that holds the GIL, so on a
    standard interpreter the thread pool bounds concurrency and keeps the
    event loop responsive rather than adding CPU parallelism. Throughput
    scales with ``resort_max_workers`` only on free-threaded builds; for
    multi-core runs on a standard build, shard the catalog across
    processes, each with its own service.

    Attributes:
        store: Source of the rule table snapshot
        settings: Worker count, overwrite policy and thresholds
    """

    def __init__(self, store: RuleTableStore, settings: Optional[EngineSettings] = None):
        self.store = store
        self.settings = settings or get_settings()
        self._log = logger.bind(component="ResortService")

    async def resort(
        self,
        items: Sequence[ResortItem],
        cancel_event: Optional[asyncio.Event] = None,
        policy: Optional[ResortPolicy] = None,
    ) -> ResortSummary:
        """Reclassify a batch of listings.

        Args:
            items: Listings to reclassify
            cancel_event: When set, items not yet started are skipped
            policy: Overrides the configured existing-category policy

        Returns:
            ResortSummary with changes in input order

        Raises:
            SnapshotUnavailableError: If the store holds no rule table
        """
        policy = policy or self.settings.resort_policy
        table = self.store.snapshot()
        classifier = ProductClassifier(table, self.settings)
        workers = self.settings.resort_max_workers

        self._log.info(
            "resort_started",
            total=len(items),
            workers=workers,
            policy=policy.value,
            rule_table_version=table.version,
        )

        semaphore = asyncio.Semaphore(max(1, workers))
        loop = asyncio.get_running_loop()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="resort") as executor:

            async def run_one(item: ResortItem) -> Outcome:
                async with semaphore:
                    if cancel_event is not None and cancel_event.is_set():
                        return None
                    try:
                        result = await loop.run_in_executor(
                            executor, classifier.classify_listing, item.listing
                        )
                    except Exception as e:
                        self._log.warning("resort_item_failed", item_id=item.id, error=str(e))
                        return ResortError(id=item.id, error=str(e))
                    return item, result

            outcomes = await asyncio.gather(*(run_one(item) for item in items))

        summary = ResortSummary(rule_table_version=table.version)
        for outcome in outcomes:
            if outcome is None:
                summary.cancelled = True
                continue
            if isinstance(outcome, ResortError):
                summary.errors.append(outcome)
                continue
            summary.total_processed += 1
            item, result = outcome
            change = self._decide(item, result, policy)
            if change is None:
                summary.unchanged += 1
            else:
                summary.changes.append(change)
                summary.reclassified += 1

        self._log.info(
            "resort_completed",
            total_processed=summary.total_processed,
            reclassified=summary.reclassified,
            unchanged=summary.unchanged,
            errors=len(summary.errors),
            cancelled=summary.cancelled,
        )
        return summary

    def _decide(
        self,
        item: ResortItem,
        result: ClassificationResult,
        policy: ResortPolicy,
    ) -> Optional[ResortChange]:
        old = item.listing.existing_category
        new = result.category
        if new is old:
            return None
        if policy is ResortPolicy.OVERWRITE_WHEN_CONFIDENT:
            # Unknown never demotes a stored category
            if new is Category.UNKNOWN:
                return None
            if result.confidence < self.settings.resort_min_confidence:
                return None
        return ResortChange(
            id=item.id,
            name=item.listing.name,
            old_category=old,
            new_category=new,
            confidence=result.confidence,
            method=result.method,
            reasoning=result.reasoning,
            specifications=result.specifications,
        )

    async def resort_by_brand(self, items: Sequence[ResortItem], brand: str, **kwargs) -> ResortSummary:
        """Resort only listings whose brand or name mentions ``brand``."""
        needle = brand.lower()
        selected = [
            item for item in items
            if needle in (item.listing.brand or "").lower() or needle in item.listing.name.lower()
        ]
        self._log.info("resort_by_brand", brand=brand, selected=len(selected))
        return await self.resort(selected, **kwargs)

    async def resort_by_category(
        self,
        items: Sequence[ResortItem],
        category: Category,
        **kwargs,
    ) -> ResortSummary:
        """Resort only listings currently stored under ``category``."""
        selected = [item for item in items if item.listing.existing_category is category]
        self._log.info("resort_by_category", category=category.value, selected=len(selected))
        return await self.resort(selected, **kwargs)

    def generate_report(self, items: Sequence[ResortItem]) -> ResortReport:
        """Summarize category health of a catalog without changing it.

        A listing is a potential misclassification when the engine
        confidently disagrees with its stored category.
        """
        classifier = ProductClassifier(self.store.snapshot(), self.settings)
        distribution: Counter = Counter()
        brands: Dict[str, Counter] = defaultdict(Counter)
        suspects: List[Misclassification] = []

        for item in items:
            stored = item.listing.existing_category
            stored_key = stored.value if stored is not None else "uncategorized"
            distribution[stored_key] += 1
            brand = (item.listing.brand or "unbranded").lower()
            brands[brand][stored_key] += 1

            result = classifier.classify_listing(item.listing)
            disagrees = stored is not None and result.category is not stored
            if disagrees and result.is_confident(self.settings.high_confidence):
                suspects.append(
                    Misclassification(
                        id=item.id,
                        name=item.listing.name,
                        category=stored,
                        expected_category=result.category,
                        confidence=result.confidence,
                    )
                )

        suspects.sort(key=lambda m: (-m.confidence, m.id))
        return ResortReport(
            category_distribution=dict(distribution),
            brand_breakdown={b: dict(c) for b, c in brands.items()},
            potential_misclassifications=suspects,
        )
