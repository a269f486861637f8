"""Panel connection procedures.

Procedures:
    POST /api/createConnection   (register a panel connection)
    GET  /api/getConnections     (list active connections)
    POST /api/updateConnection   (partial update)
    POST /api/deleteConnection   (soft delete)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.api.serializers import PanelURL, connection_json
from pterodeck.db.session import get_db
from pterodeck.logging_config import get_logger
from pterodeck.services import connection_service

router = APIRouter(tags=["connections"])
logger = get_logger(__name__)


class CreateConnectionInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    panel_url: PanelURL
    api_key: str = Field(min_length=1)
    name: str = Field(min_length=1)


class UpdateConnectionInput(BaseModel):
    """Every field except ``id`` may be omitted; omitted fields are left as they are."""

    model_config = ConfigDict(extra="forbid")

    id: int
    panel_url: PanelURL | None = None
    api_key: str | None = Field(default=None, min_length=1)
    name: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class ConnectionIdInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int


@router.post("/createConnection")
async def create_connection(
    body: CreateConnectionInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Register a panel connection."""
    conn = await connection_service.create_connection(
        db,
        panel_url=body.panel_url,
        api_key=body.api_key,
        name=body.name,
    )
    return JSONResponse(content=connection_json(conn))


@router.get("/getConnections")
async def get_connections(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """List active connections."""
    connections = await connection_service.list_connections(db)
    return JSONResponse(content=[connection_json(c) for c in connections])


@router.post("/updateConnection")
async def update_connection(
    body: UpdateConnectionInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Update the supplied connection fields."""
    changes = body.model_dump(exclude_unset=True, exclude={"id"})
    null_fields = [k for k, v in changes.items() if v is None]
    if null_fields:
        raise HTTPException(
            status_code=422,
            detail=f"Fields cannot be null: {', '.join(sorted(null_fields))}",
        )

    try:
        conn = await connection_service.update_connection(db, body.id, changes)
    except ValueError as e:
        logger.info("Connection update failed", connection_id=body.id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content=connection_json(conn))


@router.post("/deleteConnection")
async def delete_connection(
    body: ConnectionIdInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Soft delete a connection that has no active servers."""
    try:
        success = await connection_service.delete_connection(db, body.id)
    except ValueError as e:
        logger.info("Connection deletion failed", connection_id=body.id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content={"success": success})
