"""Server-rendered operator dashboard.

The page reads the three collections once and renders them into tabs.
All changes go back through the /api procedures from the browser.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.config import settings
from pterodeck.db.models import Language, ServerStatus
from pterodeck.db.session import get_db
from pterodeck.services import connection_service, server_service, template_service

router = APIRouter(tags=["dashboard"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

RECENT_SERVER_COUNT = 5


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, db: AsyncSession = Depends(get_db)) -> HTMLResponse:
    connections = await connection_service.list_connections(db)
    server_templates = await template_service.list_templates(db)
    servers = await server_service.list_servers(db)

    connection_names = {c.id: c.name for c in connections}
    template_names = {t.id: t.name for t in server_templates}
    running = [s for s in servers if s.status == ServerStatus.ACTIVE.value]
    recent = sorted(servers, key=lambda s: s.created_at, reverse=True)[:RECENT_SERVER_COUNT]

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "api_prefix": settings.api_prefix,
            "connections": connections,
            "server_templates": server_templates,
            "servers": servers,
            "recent_servers": recent,
            "running_count": len(running),
            "connection_names": connection_names,
            "template_names": template_names,
            "languages": [lang.value for lang in Language],
            "statuses": [s.value for s in ServerStatus],
        },
    )
