"""Tests for the created server service: creation checks, URL derivation, status, soft delete."""

import re
from unittest.mock import AsyncMock

import pytest

from pterodeck.db.models import ServerStatus
from pterodeck.services.provisioner import (
    SIMULATED_ID_MAX,
    SIMULATED_ID_MIN,
    ProvisioningError,
    SimulatedProvisioner,
)
from pterodeck.services.server_service import (
    build_server_url,
    create_server,
    delete_server,
    get_server,
    list_servers,
    update_server_status,
)


class TestBuildServerUrl:
    def test_concatenates_panel_url(self):
        assert build_server_url("https://panel.example.com", 1234) == (
            "https://panel.example.com/server/1234"
        )


class TestSimulatedProvisioner:
    async def test_id_in_range(self, connection, template):
        provisioner = SimulatedProvisioner()
        for _ in range(20):
            server_id = await provisioner.create_server(connection, template, "demo")
            assert SIMULATED_ID_MIN <= server_id <= SIMULATED_ID_MAX


class TestCreateServer:
    async def test_creates_in_creating_status(self, db_returning, connection, template):
        db = db_returning(connection, template)

        server = await create_server(
            db,
            connection_id=1,
            template_id=1,
            server_name="demo",
            provisioner=SimulatedProvisioner(),
        )

        assert server.status == "creating"
        assert server.server_name == "demo"
        assert server.connection_id == 1
        assert server.template_id == 1
        assert re.fullmatch(r"https://panel\.example\.com/server/\d+", server.server_url)
        assert server.server_url.endswith(f"/server/{server.pterodactyl_server_id}")
        assert server.created_at is not None
        assert server.updated_at is not None
        db.add.assert_called_once_with(server)

    async def test_uses_provisioner_id(self, db_returning, connection, template):
        db = db_returning(connection, template)
        provisioner = AsyncMock()
        provisioner.create_server.return_value = 555

        server = await create_server(db, 1, 1, "demo", provisioner)

        assert server.pterodactyl_server_id == 555
        assert server.server_url == "https://panel.example.com/server/555"
        provisioner.create_server.assert_awaited_once_with(connection, template, "demo")

    async def test_missing_or_inactive_connection(self, db_returning):
        db = db_returning(None)
        provisioner = AsyncMock()

        with pytest.raises(ValueError, match="Connection not found or inactive"):
            await create_server(db, 9, 1, "demo", provisioner)
        provisioner.create_server.assert_not_called()
        db.add.assert_not_called()

    async def test_missing_or_inactive_template(self, db_returning, connection):
        db = db_returning(connection, None)
        provisioner = AsyncMock()

        with pytest.raises(ValueError, match="Template not found or inactive"):
            await create_server(db, 1, 9, "demo", provisioner)
        provisioner.create_server.assert_not_called()
        db.add.assert_not_called()

    async def test_active_checks_in_query(self, db_returning, connection, template):
        db = db_returning(connection, template)
        await create_server(db, 1, 1, "demo", SimulatedProvisioner())

        conn_sql = str(db.execute.call_args_list[0].args[0])
        template_sql = str(db.execute.call_args_list[1].args[0])
        assert "pterodactyl_connections.is_active IS" in conn_sql
        assert "server_templates.is_active IS" in template_sql

    async def test_provisioning_failure_inserts_nothing(self, db_returning, connection, template):
        db = db_returning(connection, template)
        provisioner = AsyncMock()
        provisioner.create_server.side_effect = ProvisioningError("egg 15 does not exist")

        with pytest.raises(ValueError, match="Server provisioning failed: egg 15 does not exist"):
            await create_server(db, 1, 1, "demo", provisioner)
        db.add.assert_not_called()


class TestGetServer:
    async def test_found(self, db_returning, server):
        db = db_returning(server)
        assert await get_server(db, 7) is server

    async def test_missing_returns_none(self, db_returning):
        db = db_returning(None)
        assert await get_server(db, 7) is None


class TestListServers:
    async def test_returns_all_statuses(self, db_returning, server):
        deleted = type(server)(
            id=8,
            connection_id=1,
            template_id=1,
            pterodactyl_server_id=1001,
            server_name="old",
            server_url="https://panel.example.com/server/1001",
            status="deleted",
        )
        db = db_returning([server, deleted])
        assert await list_servers(db) == [server, deleted]


class TestUpdateServerStatus:
    async def test_changes_only_status_and_updated_at(self, db_returning, server):
        db = db_returning(server)
        before = {
            "server_name": server.server_name,
            "connection_id": server.connection_id,
            "template_id": server.template_id,
            "pterodactyl_server_id": server.pterodactyl_server_id,
            "server_url": server.server_url,
            "created_at": server.created_at,
        }
        previous_updated_at = server.updated_at

        result = await update_server_status(db, 7, ServerStatus.ACTIVE)

        assert result.status == "active"
        assert result.updated_at > previous_updated_at
        for field, value in before.items():
            assert getattr(result, field) == value

    async def test_any_transition_allowed(self, db_returning, server):
        server.status = "deleted"
        db = db_returning(server)

        result = await update_server_status(db, 7, "creating")
        assert result.status == "creating"

    async def test_not_found(self, db_returning):
        db = db_returning(None)
        with pytest.raises(ValueError, match="Server with id 7 not found"):
            await update_server_status(db, 7, "active")

    async def test_unknown_status_rejected(self, mock_db):
        with pytest.raises(ValueError):
            await update_server_status(mock_db, 7, "paused")
        mock_db.execute.assert_not_called()


class TestDeleteServer:
    async def test_soft_deletes(self, db_returning, server):
        db = db_returning(server)
        previous_updated_at = server.updated_at

        assert await delete_server(db, 7) is True
        assert server.status == "deleted"
        assert server.updated_at > previous_updated_at
        db.delete.assert_not_called()

    async def test_already_deleted(self, db_returning, server):
        server.status = "deleted"
        db = db_returning(server)

        with pytest.raises(ValueError, match="Server with id 7 is already deleted"):
            await delete_server(db, 7)

    async def test_not_found(self, db_returning):
        db = db_returning(None)
        with pytest.raises(ValueError, match="Server with id 7 not found"):
            await delete_server(db, 7)

    async def test_failed_server_can_be_deleted(self, db_returning, server):
        server.status = "failed"
        db = db_returning(server)
        assert await delete_server(db, 7) is True
