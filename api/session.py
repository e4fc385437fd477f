"""In-memory registry of open tables."""

import logging
from datetime import datetime, timedelta
from uuid import uuid4

from config import AppConfig, config
from core.game import BlackjackTable

logger = logging.getLogger(__name__)


class TableRegistry:
    """Keeps one BlackjackTable per table id for the life of the process."""

    def __init__(self, app_config: AppConfig | None = None) -> None:
        self._config = app_config or config
        self._tables: dict[str, tuple[BlackjackTable, datetime]] = {}

    def create(self) -> tuple[str, BlackjackTable]:
        """Open a new table with a fresh shoe and zeroed counters."""
        self.cleanup_idle()
        table_id = str(uuid4())
        table = BlackjackTable(
            timing=self._config.timing,
            table_config=self._config.table,
        )
        self._tables[table_id] = (table, datetime.now())
        logger.info("Opened table %s", table_id)
        return table_id, table

    def get(self, table_id: str) -> BlackjackTable | None:
        """
        Return the table, refreshing its last-activity time.

        A table idle for longer than the TTL is closed and None returned.
        """
        entry = self._tables.get(table_id)
        if entry is None:
            return None

        table, last_seen = entry
        if last_seen < self._cutoff():
            logger.info("Table %s expired", table_id)
            self.close(table_id)
            return None

        self._tables[table_id] = (table, datetime.now())
        return table

    def close(self, table_id: str) -> None:
        """Forget a table."""
        self._tables.pop(table_id, None)

    def cleanup_idle(self) -> int:
        """Close tables idle for longer than the configured TTL."""
        cutoff = self._cutoff()
        idle = [tid for tid, (_, seen) in self._tables.items() if seen < cutoff]
        for tid in idle:
            del self._tables[tid]
        if idle:
            logger.info("Closed %d idle tables", len(idle))
        return len(idle)

    def _cutoff(self) -> datetime:
        return datetime.now() - timedelta(seconds=self._config.table_ttl)

    def __len__(self) -> int:
        return len(self._tables)


# Global registry instance
_registry: TableRegistry | None = None


def get_registry() -> TableRegistry:
    """Get or create the table registry."""
    global _registry
    if _registry is None:
        _registry = TableRegistry()
    return _registry
