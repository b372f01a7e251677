"""Route Dependencies — wires process-wide resources into per-request services.

Invariants:
    - The storage adapter and payment verifier live on app.state, created in the
      lifespan; nothing here opens connections
    - Tests swap resources through app.dependency_overrides[get_storage] /
      [get_verifier] / [get_settings]
"""

from fastapi import Depends, Request

from wall.api.payment_gate import PaymentGate
from wall.config import Settings, get_settings
from wall.core.repository_protocols import PaymentVerifier, StorageAdapter
from wall.services.finalization import FinalizationCoordinator
from wall.services.message_repository import MessageRepository
from wall.services.submission import PendingMessageStore


def get_storage(request: Request) -> StorageAdapter:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage not initialized")
    return storage


def get_verifier(request: Request) -> PaymentVerifier:
    verifier = getattr(request.app.state, "verifier", None)
    if verifier is None:
        raise RuntimeError("Payment verifier not initialized")
    return verifier


def get_pending_store(
    storage: StorageAdapter = Depends(get_storage),
) -> PendingMessageStore:
    return PendingMessageStore(storage)


def get_coordinator(
    storage: StorageAdapter = Depends(get_storage),
) -> FinalizationCoordinator:
    return FinalizationCoordinator(storage)


def get_repository(
    storage: StorageAdapter = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> MessageRepository:
    return MessageRepository(storage, settings.admin_token)


def get_payment_gate(
    verifier: PaymentVerifier = Depends(get_verifier),
    settings: Settings = Depends(get_settings),
) -> PaymentGate:
    return PaymentGate(verifier, settings)
