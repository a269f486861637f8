"""Tests for connection procedures: input validation, row shape, error mapping."""

from unittest.mock import AsyncMock, patch


class TestCreateConnection:
    async def test_returns_created_row(self, client, mock_db):
        response = await client.post(
            "/api/createConnection",
            json={"panel_url": "https://panel.example.com", "api_key": "ptla_x", "name": "Main"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["panel_url"] == "https://panel.example.com"
        assert data["name"] == "Main"
        assert data["api_key"] == "ptla_x"
        assert data["is_active"] is True
        assert data["user_id"] == "default_user"
        assert data["created_at"] is not None
        assert data["updated_at"] is not None
        mock_db.add.assert_called_once()

    async def test_invalid_url_rejected(self, client, mock_db):
        response = await client.post(
            "/api/createConnection",
            json={"panel_url": "not a url", "api_key": "k", "name": "Main"},
        )
        assert response.status_code == 422
        mock_db.add.assert_not_called()

    async def test_empty_api_key_rejected(self, client):
        response = await client.post(
            "/api/createConnection",
            json={"panel_url": "https://panel.example.com", "api_key": "", "name": "Main"},
        )
        assert response.status_code == 422

    async def test_unknown_field_rejected(self, client):
        response = await client.post(
            "/api/createConnection",
            json={
                "panel_url": "https://panel.example.com",
                "api_key": "k",
                "name": "Main",
                "user_id": "mallory",
            },
        )
        assert response.status_code == 422


class TestGetConnections:
    async def test_lists_rows(self, client, db_returning, connection):
        db_returning([connection])

        response = await client.get("/api/getConnections")

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 1
        assert rows[0]["id"] == 1
        assert rows[0]["is_active"] is True


class TestUpdateConnection:
    async def test_applies_only_supplied_fields(self, client, db_returning, connection):
        db_returning(connection)

        response = await client.post("/api/updateConnection", json={"id": 1, "name": "Renamed"})

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["panel_url"] == "https://panel.example.com"
        assert data["api_key"] == "ptla_secret"
        assert data["updated_at"] > data["created_at"]

    async def test_passes_only_set_fields_to_service(self, client, connection):
        with patch(
            "pterodeck.api.routers.connections.connection_service.update_connection",
            new_callable=AsyncMock,
            return_value=connection,
        ) as mock_update:
            response = await client.post(
                "/api/updateConnection", json={"id": 1, "is_active": False}
            )

        assert response.status_code == 200
        assert mock_update.call_args.args[1:] == (1, {"is_active": False})

    async def test_null_rejected(self, client):
        response = await client.post("/api/updateConnection", json={"id": 1, "name": None})
        assert response.status_code == 422

    async def test_not_found_is_400(self, client, db_returning):
        db_returning(None)

        response = await client.post("/api/updateConnection", json={"id": 42, "name": "x"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Connection with id 42 not found"


class TestDeleteConnection:
    async def test_success(self, client, db_returning, connection):
        db_returning(connection, 0)

        response = await client.post("/api/deleteConnection", json={"id": 1})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert connection.is_active is False

    async def test_active_servers_block(self, client, db_returning, connection):
        db_returning(connection, 3)

        response = await client.post("/api/deleteConnection", json={"id": 1})

        assert response.status_code == 400
        assert "3 active server(s)" in response.json()["detail"]

    async def test_already_deleted(self, client, db_returning, connection):
        connection.is_active = False
        db_returning(connection)

        response = await client.post("/api/deleteConnection", json={"id": 1})

        assert response.status_code == 400
        assert response.json()["detail"] == "Connection with id 1 is already deleted"
