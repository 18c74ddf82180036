"""Append-only log of human category assignments."""
import threading
from pathlib import Path
from typing import List, Optional, Tuple, Union

import structlog

from partsort.models.feedback import FeedbackEntry
from partsort.models.listing import Category, Listing
from partsort.services.normalization import listing_fingerprint

logger = structlog.get_logger(__name__)


class FeedbackLog:
    """Thread-safe, append-only feedback store.

    When a path is given every entry is also appended to it as one JSON
    line. Entries are never edited or removed.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        self._entries: List[FeedbackEntry] = []
        self._lock = threading.Lock()
        self._log = logger.bind(component="FeedbackLog")

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FeedbackLog":
        """Open a JSON-lines log, reading any entries already on disk."""
        log = cls(path)
        if log.path is not None and log.path.exists():
            with log.path.open(encoding="utf-8") as fh:
                for line in fh:
                    if line.strip():
                        log._entries.append(FeedbackEntry.model_validate_json(line))
        log._log.info("feedback_log_loaded", path=str(path), entries=len(log._entries))
        return log

    def append(self, entry: FeedbackEntry) -> None:
        with self._lock:
            if self.path is not None:
                with self.path.open("a", encoding="utf-8") as fh:
                    fh.write(entry.model_dump_json() + "\n")
            self._entries.append(entry)
        self._log.debug(
            "feedback_recorded",
            fingerprint=entry.listing_fingerprint,
            category=entry.human_assigned_category.value,
        )

    def record(self, listing: Listing, category: Category) -> FeedbackEntry:
        """Append the human-assigned category of a listing."""
        entry = FeedbackEntry(
            listing_fingerprint=listing_fingerprint(listing.name, listing.description),
            human_assigned_category=category,
        )
        self.append(entry)
        return entry

    def entries(self) -> Tuple[FeedbackEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
