"""
Shared fixtures for API tests.

The app is built with the session and provisioner dependencies overridden,
so procedures run the real services against the AsyncMock session.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pterodeck.api.app import create_application
from pterodeck.db.session import get_db
from pterodeck.services.provisioner import get_provisioner


@pytest.fixture
def provisioner():
    fake = AsyncMock()
    fake.create_server.return_value = 4321
    return fake


@pytest.fixture
def app(mock_db, provisioner):
    app = create_application()

    async def override_db():
        return mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_provisioner] = lambda: provisioner
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
