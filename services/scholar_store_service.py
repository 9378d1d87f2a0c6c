"""
Scholar store used by the import commit step.

The real persistence layer lives outside this service. What the import
workflow needs is an awaitable save_many() that either accepts the whole
batch or raises. InMemoryScholarStore simulates the storage round trip
with a configurable delay.
"""

import asyncio
from typing import Optional, Protocol

import structlog

from config import settings
from models.scholar import ScholarRecord

logger = structlog.get_logger(__name__)


class ScholarStore(Protocol):
    """Persistence collaborator for committed scholar records."""

    async def save_many(self, records: list[ScholarRecord]) -> int:
        """Persist all records or none. Returns the number saved."""
        ...


class InMemoryScholarStore:
    """Keeps committed scholars in a list after a simulated write delay."""

    def __init__(self, delay_seconds: Optional[float] = None):
        self.delay_seconds = (
            settings.import_commit_delay_seconds if delay_seconds is None else delay_seconds
        )
        self.records: list[ScholarRecord] = []

    async def save_many(self, records: list[ScholarRecord]) -> int:
        logger.debug("scholar_store_write_started", count=len(records), delay=self.delay_seconds)

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        self.records.extend(records)

        logger.info("scholars_saved", count=len(records), total=len(self.records))
        return len(records)


_store: Optional[InMemoryScholarStore] = None


def get_scholar_store() -> InMemoryScholarStore:
    global _store
    if _store is None:
        _store = InMemoryScholarStore()
    return _store
