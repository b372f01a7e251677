"""Finalization Coordinator — the only path from pending to committed.

Invariants:
    - finalize commits at most one Message per token, even under concurrent calls
      (StorageAdapter.promote_pending claims the pending row and inserts the
      message in one transaction)
    - The pending row disappears only together with a successful insert
    - An unknown, consumed, or expired token raises PendingNotFoundError;
      callers treat it as "already used" and redirect to the public view
    - payer must be a non-empty string from a verified payment; anything else
      refuses to finalize (fail closed)
    - A token that token_urlsafe could not have issued is "not found" without a
      storage round trip, so every backend answers it the same way
"""

import logging

from wall.core.domain_types import (
    Message, PendingMessage, PendingToken, is_well_formed_token,
)
from wall.core.errors import PaymentConfirmationError, PendingNotFoundError
from wall.core.repository_protocols import StorageAdapter

logger = logging.getLogger(__name__)


class FinalizationCoordinator:
    """Promotes paid pending messages into the public message ledger."""

    def __init__(self, storage: StorageAdapter):
        self.storage = storage

    async def lookup(self, token: PendingToken) -> PendingMessage | None:
        """Pre-payment check: is there still something to pay for?"""
        if not is_well_formed_token(token):
            return None
        return await self.storage.get_pending(token)

    async def finalize(self, token: PendingToken, payer: str) -> Message:
        if not isinstance(payer, str) or not payer.strip():
            raise PaymentConfirmationError("payer identity missing")
        if not is_well_formed_token(token):
            raise PendingNotFoundError()

        message = await self.storage.promote_pending(token, payer.strip())
        if message is None:
            logger.warning("Pending message not found (unknown, used, or expired token)")
            raise PendingNotFoundError()

        logger.info(
            "Message committed",
            extra={"message_id": message.id, "payer": message.payer},
        )
        return message
