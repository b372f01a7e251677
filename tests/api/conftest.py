"""API test fixtures — FastAPI app with storage and verifier overridden.

Invariants:
    - Lifespan does not run under ASGITransport: resources come from
      dependency_overrides, never from the real facilitator or wall.db
    - Redirects are NOT followed, so tests assert on 303 targets directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from wall.api.dependencies import get_storage, get_verifier
from wall.main import app
from tests.mock_facilitator import MockFacilitator


@pytest.fixture
def facilitator():
    return MockFacilitator()


@pytest.fixture
async def client(storage, facilitator):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_verifier] = lambda: facilitator

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
