"""Row serializers and shared input validators for the procedure routers.

Rows are returned flat, keyed by column name, with ISO-8601 timestamps.
"""

from datetime import UTC, datetime
from typing import Annotated
from urllib.parse import urlparse

from pydantic import AfterValidator

from pterodeck.db.models import CreatedServer, PanelConnection, ServerTemplate


def _check_url(value: str) -> str:
    """Require an absolute http(s) URL, returned exactly as given."""
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


PanelURL = Annotated[str, AfterValidator(_check_url)]


def _iso(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat()


def connection_json(conn: PanelConnection) -> dict:
    return {
        "id": conn.id,
        "user_id": conn.user_id,
        "panel_url": conn.panel_url,
        "api_key": conn.api_key,
        "name": conn.name,
        "is_active": conn.is_active,
        "created_at": _iso(conn.created_at),
        "updated_at": _iso(conn.updated_at),
    }


def template_json(template: ServerTemplate) -> dict:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "language": template.language,
        "version": template.version,
        "egg_id": template.egg_id,
        "docker_image": template.docker_image,
        "startup_command": template.startup_command,
        "environment_variables": template.environment_variables,
        "memory": template.memory,
        "disk": template.disk,
        "cpu": template.cpu,
        "is_active": template.is_active,
        "created_at": _iso(template.created_at),
    }


def server_json(server: CreatedServer) -> dict:
    return {
        "id": server.id,
        "connection_id": server.connection_id,
        "template_id": server.template_id,
        "pterodactyl_server_id": server.pterodactyl_server_id,
        "server_name": server.server_name,
        "server_url": server.server_url,
        "status": server.status,
        "created_at": _iso(server.created_at),
        "updated_at": _iso(server.updated_at),
    }
