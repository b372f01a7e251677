"""Pending Message Store — submission phase of the two-phase lifecycle.

Invariants:
    - Input is sanitized BEFORE any storage call
    - Tokens carry 256 bits from secrets (unguessable, not enumerable)
    - A token is returned only after its pending row is persisted; a storage
      failure propagates as StorageError and no token leaves this function
"""

import logging
import secrets
from typing import Callable

from wall.core.domain_types import PendingToken, TOKEN_BYTES
from wall.core.repository_protocols import StorageAdapter
from wall.core.sanitize import sanitize_submission

logger = logging.getLogger(__name__)


def new_token() -> PendingToken:
    return PendingToken(secrets.token_urlsafe(TOKEN_BYTES))


class PendingMessageStore:
    """Holds submitted-but-unpaid messages until payment is confirmed."""

    def __init__(
        self,
        storage: StorageAdapter,
        token_factory: Callable[[], PendingToken] = new_token,
    ):
        self.storage = storage
        self.token_factory = token_factory

    async def submit(self, raw_body: object, raw_author: object = None) -> PendingToken:
        """Sanitize, persist as pending, and hand back the single-use token."""
        clean = sanitize_submission(raw_body, raw_author)
        token = self.token_factory()
        await self.storage.insert_pending(token, clean.body, clean.author)
        logger.info(f"Pending message stored ({len(clean.body)} chars)")
        return token
