"""Root conftest — shared test configuration and storage fixtures.

Invariants:
    - Environment pinned BEFORE wall.config is imported (get_settings is cached)
    - Every test gets a fresh file-backed SQLite database in tmp_path
      (file, not :memory:, so concurrent sessions use separate connections)
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("SELLER_ADDRESS", "0x209693Bc6afc0C5328bA36FaF03C514EF312287C")
os.environ.setdefault("NETWORK", "base-sepolia")
os.environ.setdefault("MESSAGE_PRICE", "$0.001")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from wall.infrastructure.storage import SqliteStorage  # noqa: E402

ADMIN_TOKEN = "test-admin-token"


@pytest.fixture
async def storage(tmp_path):
    store = SqliteStorage(
        f"sqlite+aiosqlite:///{tmp_path / 'wall.db'}", pending_ttl_seconds=3600,
    )
    await store.create_schema()
    yield store
    await store.close()
