"""Pterodactyl panel connection CRUD service.

Connections are soft-deleted: deactivation is refused while any server
created through the connection is still in the ``active`` status.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.config import settings
from pterodeck.db.models import CreatedServer, PanelConnection, ServerStatus, utc_now
from pterodeck.logging_config import get_logger

logger = get_logger(__name__)

UPDATABLE_FIELDS = frozenset({"panel_url", "api_key", "name", "is_active"})


async def create_connection(
    db: AsyncSession,
    panel_url: str,
    api_key: str,
    name: str,
    owner: str | None = None,
) -> PanelConnection:
    """Register a panel connection. The API key is not checked against the panel."""
    now = utc_now()
    conn = PanelConnection(
        user_id=settings.default_owner if owner is None else owner,
        panel_url=panel_url,
        api_key=api_key,
        name=name,
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(conn)
    await db.flush()

    logger.info("Connection created", connection_id=conn.id, name=name, panel_url=panel_url)
    return conn


async def get_connection(db: AsyncSession, connection_id: int) -> PanelConnection | None:
    """Get a connection by ID, active or not."""
    result = await db.execute(select(PanelConnection).where(PanelConnection.id == connection_id))
    return result.scalar_one_or_none()


async def list_connections(db: AsyncSession) -> list[PanelConnection]:
    """List active connections.

    TODO: filter by owner once connections carry a real user identity.
    """
    result = await db.execute(
        select(PanelConnection)
        .where(PanelConnection.is_active.is_(True))
        .order_by(PanelConnection.id)
    )
    return list(result.scalars().all())


async def update_connection(
    db: AsyncSession, connection_id: int, changes: Mapping[str, Any]
) -> PanelConnection:
    """Apply a partial update. Keys absent from ``changes`` are left untouched."""
    conn = await get_connection(db, connection_id)
    if conn is None:
        raise ValueError(f"Connection with id {connection_id} not found")

    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            raise ValueError(f"Connection field '{field}' cannot be updated")
        setattr(conn, field, value)
    conn.updated_at = utc_now()
    await db.flush()

    logger.info(
        "Connection updated",
        connection_id=connection_id,
        fields=sorted(changes),
    )
    return conn


async def count_active_servers(db: AsyncSession, connection_id: int) -> int:
    """Count servers in the ``active`` status that were created through a connection."""
    result = await db.execute(
        select(func.count())
        .select_from(CreatedServer)
        .where(
            CreatedServer.connection_id == connection_id,
            CreatedServer.status == ServerStatus.ACTIVE.value,
        )
    )
    return result.scalar_one()


async def delete_connection(db: AsyncSession, connection_id: int) -> bool:
    """Soft delete a connection by marking it inactive."""
    conn = await get_connection(db, connection_id)
    if conn is None:
        raise ValueError(f"Connection with id {connection_id} not found")

    if not conn.is_active:
        raise ValueError(f"Connection with id {connection_id} is already deleted")

    active_servers = await count_active_servers(db, connection_id)
    if active_servers > 0:
        raise ValueError(
            f"Cannot delete connection: {active_servers} active server(s) "
            "are using this connection"
        )

    conn.is_active = False
    conn.updated_at = utc_now()
    await db.flush()

    logger.info("Connection deleted", connection_id=connection_id)
    return True
