"""Boundary Protocols — contracts between core services and infrastructure.

Invariants:
    - Services NEVER import a concrete backend — they receive a StorageAdapter
    - Only StorageAdapter implementations hold an engine/connection
    - get_pending / promote_pending on an unknown, consumed, or expired token return
      None; "not found" is never signalled by an exception
    - promote_pending is the ONLY path from pending to committed, and is atomic

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass fakes without inheritance
    - Async in Protocol: every storage call is a suspension point on the event loop
"""

from datetime import datetime
from typing import Protocol

from x402.types import (
    PaymentPayload, PaymentRequirements, SettleResponse, VerifyResponse,
)

from wall.core.domain_types import Message, MessageId, PendingMessage, PendingToken


class StorageAdapter(Protocol):
    """Backend-agnostic persistence for pending and committed messages."""

    backend_name: str

    async def create_schema(self) -> None: ...
    async def insert_pending(
        self, token: PendingToken, body: str, author: str,
    ) -> None: ...
    async def get_pending(self, token: PendingToken) -> PendingMessage | None: ...
    async def delete_pending(self, token: PendingToken) -> bool: ...
    async def insert_message(
        self, body: str, author: str, payer: str | None,
    ) -> MessageId: ...
    async def list_messages(self) -> list[Message]: ...
    async def delete_message(self, message_id: MessageId) -> bool: ...
    async def promote_pending(
        self, token: PendingToken, payer: str,
    ) -> Message | None: ...
    async def purge_expired_pending(self, older_than: datetime) -> int: ...
    async def health_check(self) -> bool: ...
    async def close(self) -> None: ...


class PaymentVerifier(Protocol):
    """External payment verification contract (x402 facilitator)."""

    async def verify(
        self, payment: PaymentPayload, requirements: PaymentRequirements,
    ) -> VerifyResponse: ...
    async def settle(
        self, payment: PaymentPayload, requirements: PaymentRequirements,
    ) -> SettleResponse: ...
