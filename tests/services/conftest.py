"""Service test fixtures — services wired to a real SQLite storage adapter."""

import pytest

from wall.services.finalization import FinalizationCoordinator
from wall.services.message_repository import MessageRepository
from wall.services.submission import PendingMessageStore
ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
def pending_store(storage):
    return PendingMessageStore(storage)


@pytest.fixture
def coordinator(storage):
    return FinalizationCoordinator(storage)


@pytest.fixture
def repository(storage):
    return MessageRepository(storage, ADMIN_TOKEN)
