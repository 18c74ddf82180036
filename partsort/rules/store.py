"""Atomic holder for the active rule table."""
import threading
from typing import Optional

import structlog

from partsort.config import EngineSettings, get_settings
from partsort.errors import SnapshotUnavailableError
from partsort.rules.defaults import default_rule_table
from partsort.rules.table import RuleTable, load_rule_table

logger = structlog.get_logger(__name__)


class RuleTableStore:
    """Publishes rule tables to concurrent readers.

    Readers take a snapshot at the start of a batch and keep using it even
    if a newer table is swapped in meanwhile. Tables are immutable, so the
    lock only guards the reference.
    """

    def __init__(self, table: Optional[RuleTable] = None):
        self._lock = threading.Lock()
        self._table = table
        self._log = logger.bind(component="RuleTableStore")

    @classmethod
    def from_settings(cls, settings: Optional[EngineSettings] = None) -> "RuleTableStore":
        """Create a store holding the configured or built-in table."""
        settings = settings or get_settings()
        if settings.rule_table_path:
            return cls(load_rule_table(settings.rule_table_path))
        return cls(default_rule_table())

    @property
    def version(self) -> Optional[int]:
        with self._lock:
            return self._table.version if self._table is not None else None

    def snapshot(self) -> RuleTable:
        """Return the current table.

        Raises:
            SnapshotUnavailableError: If no table has been published
        """
        with self._lock:
            table = self._table
        if table is None:
            raise SnapshotUnavailableError("No rule table has been published")
        return table

    def swap(self, table: RuleTable) -> Optional[RuleTable]:
        """Publish a new table and return the previous one."""
        with self._lock:
            previous, self._table = self._table, table
        self._log.info(
            "rule_table_swapped",
            previous_version=previous.version if previous is not None else None,
            version=table.version,
        )
        return previous
