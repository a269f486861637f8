"""Server template CRUD service."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pterodeck.db.models import Language, ServerTemplate, utc_now
from pterodeck.logging_config import get_logger

logger = get_logger(__name__)

NULLABLE_FIELDS = frozenset({"description", "environment_variables"})
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "language",
        "version",
        "egg_id",
        "docker_image",
        "startup_command",
        "environment_variables",
        "memory",
        "disk",
        "cpu",
        "is_active",
    }
)
QUOTA_FIELDS = ("memory", "disk", "cpu")


def _check_quota(field: str, value: int) -> None:
    if value <= 0:
        raise ValueError(f"Template {field} must be a positive integer, got {value}")


async def create_template(
    db: AsyncSession,
    name: str,
    language: Language | str,
    version: str,
    egg_id: int,
    docker_image: str,
    startup_command: str,
    memory: int,
    disk: int,
    cpu: int,
    description: str | None = None,
    environment_variables: dict[str, str] | None = None,
) -> ServerTemplate:
    """Create an active server template."""
    for field, value in zip(QUOTA_FIELDS, (memory, disk, cpu)):
        _check_quota(field, value)

    template = ServerTemplate(
        name=name,
        description=description,
        language=Language(language).value,
        version=version,
        egg_id=egg_id,
        docker_image=docker_image,
        startup_command=startup_command,
        environment_variables=environment_variables,
        memory=memory,
        disk=disk,
        cpu=cpu,
        is_active=True,
        created_at=utc_now(),
    )
    db.add(template)
    await db.flush()

    logger.info("Template created", template_id=template.id, name=name, language=template.language)
    return template


async def get_template(db: AsyncSession, template_id: int) -> ServerTemplate | None:
    """Get a template by ID, active or not."""
    result = await db.execute(select(ServerTemplate).where(ServerTemplate.id == template_id))
    return result.scalar_one_or_none()


async def list_templates(db: AsyncSession) -> list[ServerTemplate]:
    """List active templates."""
    result = await db.execute(
        select(ServerTemplate)
        .where(ServerTemplate.is_active.is_(True))
        .order_by(ServerTemplate.id)
    )
    return list(result.scalars().all())


async def update_template(
    db: AsyncSession, template_id: int, changes: Mapping[str, Any]
) -> ServerTemplate:
    """Apply a partial update.

    A key missing from ``changes`` leaves the column as it is. A key mapped
    to None clears the column, which only the nullable fields allow.
    Templates have no updated_at, so nothing else is touched.
    """
    template = await get_template(db, template_id)
    if template is None:
        raise ValueError(f"Template with id {template_id} not found")

    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            raise ValueError(f"Template field '{field}' cannot be updated")
        if value is None and field not in NULLABLE_FIELDS:
            raise ValueError(f"Template field '{field}' cannot be null")
        if field in QUOTA_FIELDS:
            _check_quota(field, value)
        if field == "language":
            value = Language(value).value
        setattr(template, field, value)
    await db.flush()

    logger.info("Template updated", template_id=template_id, fields=sorted(changes))
    return template
