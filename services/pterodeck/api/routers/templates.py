"""Server template procedures.

Procedures:
    POST /api/createTemplate   (create template)
    GET  /api/getTemplates     (list active templates)
    POST /api/updateTemplate   (partial update, explicit null clears nullable fields)
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, PositiveInt
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.api.serializers import template_json
from pterodeck.db.models import Language
from pterodeck.db.session import get_db
from pterodeck.logging_config import get_logger
from pterodeck.services import template_service
from pterodeck.services.template_service import NULLABLE_FIELDS

router = APIRouter(tags=["templates"])
logger = get_logger(__name__)


class CreateTemplateInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: str | None
    language: Language
    version: str = Field(min_length=1)
    egg_id: int
    docker_image: str = Field(min_length=1)
    startup_command: str = Field(min_length=1)
    environment_variables: dict[str, str] | None
    memory: PositiveInt
    disk: PositiveInt
    cpu: PositiveInt


class UpdateTemplateInput(BaseModel):
    """Omitted fields are left alone; ``null`` clears description or environment_variables."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    language: Language | None = None
    version: str | None = Field(default=None, min_length=1)
    egg_id: int | None = None
    docker_image: str | None = Field(default=None, min_length=1)
    startup_command: str | None = Field(default=None, min_length=1)
    environment_variables: dict[str, str] | None = None
    memory: PositiveInt | None = None
    disk: PositiveInt | None = None
    cpu: PositiveInt | None = None
    is_active: bool | None = None


@router.post("/createTemplate")
async def create_template(
    body: CreateTemplateInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Create a server template."""
    try:
        template = await template_service.create_template(db, **body.model_dump())
    except ValueError as e:
        logger.info("Template creation failed", name=body.name, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content=template_json(template))


@router.get("/getTemplates")
async def get_templates(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """List active templates."""
    templates = await template_service.list_templates(db)
    return JSONResponse(content=[template_json(t) for t in templates])


@router.post("/updateTemplate")
async def update_template(
    body: UpdateTemplateInput,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    """Update the supplied template fields."""
    # exclude_unset keeps explicit nulls, which is how a caller clears a field
    changes = body.model_dump(exclude_unset=True, exclude={"id"})
    null_fields = [k for k, v in changes.items() if v is None and k not in NULLABLE_FIELDS]
    if null_fields:
        raise HTTPException(
            status_code=422,
            detail=f"Fields cannot be null: {', '.join(sorted(null_fields))}",
        )

    try:
        template = await template_service.update_template(db, body.id, changes)
    except ValueError as e:
        logger.info("Template update failed", template_id=body.id, error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return JSONResponse(content=template_json(template))
