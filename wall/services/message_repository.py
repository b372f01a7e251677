"""Message Repository — public read path and administrative removal.

Invariants:
    - list() is newest first; equal timestamps fall back to insertion order
    - remove() checks the credential BEFORE touching storage, so an
      unauthorized caller learns nothing about which ids exist
    - No admin token configured means every removal is unauthorized
"""

import logging
import secrets

from wall.core.domain_types import Message, MessageId, RemovalOutcome
from wall.core.repository_protocols import StorageAdapter

logger = logging.getLogger(__name__)


class MessageRepository:
    """Append-only ledger of committed messages."""

    def __init__(self, storage: StorageAdapter, admin_token: str | None = None):
        self.storage = storage
        self.admin_token = admin_token

    async def list(self) -> list[Message]:
        return await self.storage.list_messages()

    def _authorized(self, credential: str | None) -> bool:
        if not self.admin_token or not credential:
            return False
        return secrets.compare_digest(
            credential.encode("utf-8"), self.admin_token.encode("utf-8"),
        )

    async def remove(self, message_id: MessageId, credential: str | None) -> RemovalOutcome:
        if not self._authorized(credential):
            logger.warning("Rejected message removal: bad credential")
            return RemovalOutcome.UNAUTHORIZED
        if not await self.storage.delete_message(message_id):
            return RemovalOutcome.NOT_FOUND
        logger.info("Message removed", extra={"message_id": message_id})
        return RemovalOutcome.REMOVED
