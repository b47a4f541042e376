"""Owns the in-memory catalog snapshot and the fire-once fetch that fills it."""

from __future__ import annotations

import logging
from typing import Optional

from catalog.query import PAGE_SIZE, Page, QueryEngine, QueryState
from data.catalog_source import CatalogFetchError, CatalogSourceProtocol
from data.models import CatalogEntry, SkippedRecord
from data.normalizer import Normalizer

logger = logging.getLogger(__name__)


class CatalogSession:
    """Snapshot holder for one running view of the catalog.

    refresh() fetches once and swaps the snapshot atomically. A failed fetch
    empties the snapshot instead of keeping stale data. Results that arrive
    after close() or after a newer refresh started are dropped.
    """

    def __init__(self, source: CatalogSourceProtocol,
                 normalizer: Optional[Normalizer] = None,
                 page_size: int = PAGE_SIZE):
        self.source = source
        self.normalizer = normalizer or Normalizer()
        self.page_size = page_size
        self.engine = QueryEngine((), page_size=page_size)
        self.skipped: tuple[SkippedRecord, ...] = ()
        self.loaded = False
        self.fetch_failed = False
        self.closed = False
        self._generation = 0
        self._fetching = False

    @property
    def snapshot(self) -> tuple[CatalogEntry, ...]:
        return self.engine.snapshot

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fetching(self) -> bool:
        return self._fetching

    async def refresh(self) -> bool:
        """Fetch and rebuild the snapshot. Returns True if a result was applied."""
        if self.closed:
            logger.debug("Refresh requested on closed catalog session, ignoring")
            return False
        if self._fetching:
            logger.info("Catalog fetch already in progress, not starting another")
            return False
        self._generation += 1
        token = self._generation
        self._fetching = True
        failed = False
        try:
            raws = await self.source.fetch()
        except CatalogFetchError as e:
            logger.error("Catalog fetch failed, showing empty catalog: %s", e)
            raws, failed = [], True
        finally:
            self._fetching = False

        if self.closed or token != self._generation:
            logger.info("Discarding catalog fetch result (generation %d) for a closed or superseded session",
                        token)
            return False

        result = self.normalizer.normalize(raws)
        self.engine = QueryEngine(result.entries, page_size=self.page_size)
        self.skipped = result.skipped
        self.fetch_failed = failed
        self.loaded = True
        logger.info("Catalog snapshot ready: %d entries, %d skipped",
                    len(result.entries), len(result.skipped))
        return True

    def close(self) -> None:
        """Tear down; any in-flight fetch result will be discarded."""
        self.closed = True

    def query(self, state: QueryState) -> tuple[Page, QueryState]:
        return self.engine.run(state)

    def get(self, entry_id: str) -> Optional[CatalogEntry]:
        return self.engine.get(entry_id)
