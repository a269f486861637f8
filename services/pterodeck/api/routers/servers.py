"""Created server procedures.

Procedures:
    POST /api/createServer         (provision and record a server)
    GET  /api/getServers           (list all servers)
    GET  /api/getServerById?id=N   (show server, null if missing)
    POST /api/updateServerStatus   (overwrite status)
    POST /api/deleteServer         (soft delete)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.api.serializers import server_json
from pterodeck.db.models import ServerStatus
from pterodeck.db.session import get_db
from pterodeck.logging_config import get_logger
from pterodeck.services import server_service
from pterodeck.services.provisioner import PanelProvisioner, get_provisioner

router = APIRouter(tags=["servers"])
logger = get_logger(__name__)


class CreateServerInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    connection_id: int
    template_id: int
    server_name: str = Field(min_length=1)


class UpdateServerStatusInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    status: ServerStatus


class ServerIdInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int


@router.post("/createServer")
async def create_server(
    body: CreateServerInput,
    db: AsyncSession = Depends(get_db),
    provisioner: PanelProvisioner = Depends(get_provisioner),
) -> JSONResponse:
    """Create a server from an active connection and an active template."""
    try:
        server = await server_service.create_server(
            db,
            connection_id=body.connection_id,
            template_id=body.template_id,
            server_name=body.server_name,
            provisioner=provisioner,
        )
    except ValueError as e:
        logger.info(
            "Server creation failed",
            connection_id=body.connection_id,
            template_id=body.template_id,
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content=server_json(server))


@router.get("/getServers")
async def get_servers(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """List every server, whatever its status."""
    servers = await server_service.list_servers(db)
    return JSONResponse(content=[server_json(s) for s in servers])


@router.get("/getServerById")
async def get_server_by_id(
    id: int = Query(...),
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Show a server. Responds with null when no server has the ID."""
    server = await server_service.get_server(db, id)
    return JSONResponse(content=server_json(server) if server is not None else None)


@router.post("/updateServerStatus")
async def update_server_status(
    body: UpdateServerStatusInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Set a server's status."""
    try:
        server = await server_service.update_server_status(db, body.id, body.status)
    except ValueError as e:
        logger.info("Server status update failed", server_id=body.id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content=server_json(server))


@router.post("/deleteServer")
async def delete_server(
    body: ServerIdInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Soft delete a server."""
    try:
        success = await server_service.delete_server(db, body.id)
    except ValueError as e:
        logger.info("Server deletion failed", server_id=body.id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content={"success": success})
