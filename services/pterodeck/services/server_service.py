"""Created server bookkeeping service.

Servers are created against an active connection and an active template,
then tracked through their status. Status changes are not checked against
a transition table: any status may be set from any other.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.db.models import (
    CreatedServer,
    PanelConnection,
    ServerStatus,
    ServerTemplate,
    utc_now,
)
from pterodeck.logging_config import get_logger
from pterodeck.services.provisioner import PanelProvisioner, ProvisioningError

logger = get_logger(__name__)

SERVER_PATH_SEGMENT = "/server/"


def build_server_url(panel_url: str, pterodactyl_server_id: int) -> str:
    """Derive the panel page URL for a server."""
    return f"{panel_url}{SERVER_PATH_SEGMENT}{pterodactyl_server_id}"


async def _get_active_connection(db: AsyncSession, connection_id: int) -> PanelConnection | None:
    result = await db.execute(
        select(PanelConnection).where(
            PanelConnection.id == connection_id,
            PanelConnection.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def _get_active_template(db: AsyncSession, template_id: int) -> ServerTemplate | None:
    result = await db.execute(
        select(ServerTemplate).where(
            ServerTemplate.id == template_id,
            ServerTemplate.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def create_server(
    db: AsyncSession,
    connection_id: int,
    template_id: int,
    server_name: str,
    provisioner: PanelProvisioner,
) -> CreatedServer:
    """Provision a server through the panel and record it as ``creating``."""
    conn = await _get_active_connection(db, connection_id)
    if conn is None:
        raise ValueError("Connection not found or inactive")

    template = await _get_active_template(db, template_id)
    if template is None:
        raise ValueError("Template not found or inactive")

    try:
        pterodactyl_server_id = await provisioner.create_server(conn, template, server_name)
    except ProvisioningError as e:
        logger.warning(
            "Panel provisioning failed",
            connection_id=connection_id,
            template_id=template_id,
            error=str(e),
        )
        raise ValueError(f"Server provisioning failed: {e}") from e

    now = utc_now()
    server = CreatedServer(
        connection_id=connection_id,
        template_id=template_id,
        pterodactyl_server_id=pterodactyl_server_id,
        server_name=server_name,
        server_url=build_server_url(conn.panel_url, pterodactyl_server_id),
        status=ServerStatus.CREATING.value,
        created_at=now,
        updated_at=now,
    )
    db.add(server)
    await db.flush()

    logger.info(
        "Server created",
        server_id=server.id,
        connection_id=connection_id,
        template_id=template_id,
        pterodactyl_server_id=pterodactyl_server_id,
    )
    return server


async def get_server(db: AsyncSession, server_id: int) -> CreatedServer | None:
    """Get a server by ID. Returns None if not found."""
    result = await db.execute(select(CreatedServer).where(CreatedServer.id == server_id))
    return result.scalar_one_or_none()


async def list_servers(db: AsyncSession) -> list[CreatedServer]:
    """List all servers regardless of status."""
    result = await db.execute(select(CreatedServer).order_by(CreatedServer.id))
    return list(result.scalars().all())


async def update_server_status(
    db: AsyncSession, server_id: int, status: ServerStatus | str
) -> CreatedServer:
    """Overwrite a server's status."""
    target = ServerStatus(status)
    server = await get_server(db, server_id)
    if server is None:
        raise ValueError(f"Server with id {server_id} not found")

    old_status = server.status
    server.status = target.value
    server.updated_at = utc_now()
    await db.flush()

    logger.info(
        "Server status updated",
        server_id=server_id,
        from_status=old_status,
        to_status=target.value,
    )
    return server


async def delete_server(db: AsyncSession, server_id: int) -> bool:
    """Soft delete a server by moving it to ``deleted``. The panel is not contacted."""
    server = await get_server(db, server_id)
    if server is None:
        raise ValueError(f"Server with id {server_id} not found")

    if server.status == ServerStatus.DELETED.value:
        raise ValueError(f"Server with id {server_id} is already deleted")

    server.status = ServerStatus.DELETED.value
    server.updated_at = utc_now()
    await db.flush()

    logger.info("Server deleted", server_id=server_id)
    return True
