"""Pending Cleanup — expires abandoned pending messages.

Invariants:
    - Only rows older than the TTL are removed; fresh tokens are never touched
    - ttl_seconds <= 0 disables purging (and the storage adapter stops filtering)
    - A failed purge is logged and retried on the next tick; it never stops the loop
"""

import asyncio
import logging
from datetime import timedelta

from wall.core.errors import StorageError
from wall.core.repository_protocols import StorageAdapter
from wall.core.timestamps import utc_now

logger = logging.getLogger(__name__)


async def purge_once(storage: StorageAdapter, ttl_seconds: int) -> int:
    if ttl_seconds <= 0:
        return 0
    cutoff = utc_now() - timedelta(seconds=ttl_seconds)
    purged = await storage.purge_expired_pending(cutoff)
    if purged:
        logger.info("Expired pending messages purged", extra={"purged": purged})
    return purged


async def run_purge_loop(
    storage: StorageAdapter, ttl_seconds: int, interval_seconds: int,
) -> None:
    """Background task started by the app lifespan; cancelled on shutdown."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await purge_once(storage, ttl_seconds)
        except StorageError as e:
            logger.error(f"Pending purge failed: {e.message}", extra={"error_code": e.code})
