"""
Top-level test configuration for pterodeck.

Services run against an AsyncMock session; ``db_returning`` queues the rows
that successive ``db.execute`` calls resolve to.
"""

import os

# Ensure test-friendly defaults
os.environ.setdefault("PTERODECK_JSON_LOGS", "false")
os.environ.setdefault("PTERODECK_LOG_LEVEL", "DEBUG")

from datetime import UTC, datetime  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from pterodeck.db.models import CreatedServer, PanelConnection, ServerTemplate  # noqa: E402

EARLIER = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def result_of(value) -> MagicMock:
    """Build a fake Result whose scalar accessors all yield ``value``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else [value]
    return result


@pytest.fixture
def mock_db():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def db_returning(mock_db):
    def _queue(*values):
        mock_db.execute.side_effect = [result_of(v) for v in values]
        return mock_db

    return _queue


@pytest.fixture
def connection() -> PanelConnection:
    return PanelConnection(
        id=1,
        user_id="default_user",
        panel_url="https://panel.example.com",
        api_key="ptla_secret",
        name="Main panel",
        is_active=True,
        created_at=EARLIER,
        updated_at=EARLIER,
    )


@pytest.fixture
def template() -> ServerTemplate:
    return ServerTemplate(
        id=1,
        name="Discord bot",
        description="Python 3.12 worker",
        language="python",
        version="3.12",
        egg_id=15,
        docker_image="ghcr.io/pterodactyl/yolks:python_3.12",
        startup_command="python bot.py",
        environment_variables={"BOT_TOKEN": "abc"},
        memory=512,
        disk=1024,
        cpu=50,
        is_active=True,
        created_at=EARLIER,
    )


@pytest.fixture
def server() -> CreatedServer:
    return CreatedServer(
        id=7,
        connection_id=1,
        template_id=1,
        pterodactyl_server_id=4242,
        server_name="demo",
        server_url="https://panel.example.com/server/4242",
        status="creating",
        created_at=EARLIER,
        updated_at=EARLIER,
    )
