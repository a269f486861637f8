"""
SQLAlchemy database models for pterodeck.

All models use:
- Integer autoincrement primary keys
- snake_case column names
- Plural table names
- TIMESTAMPTZ with UTC for all timestamps
- Soft deletes (is_active flag / deleted status), nothing is removed
- Plain integer reference columns between servers and their connection and
  template, with no database-level foreign keys and no cascades
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


class Language(StrEnum):
    """Runtime languages a server template can target."""

    PYTHON = "python"
    NODEJS = "nodejs"


class ServerStatus(StrEnum):
    """Lifecycle status of a created server. Transitions are unrestricted."""

    CREATING = "creating"
    ACTIVE = "active"
    FAILED = "failed"
    DELETED = "deleted"


class Base(DeclarativeBase):
    """Base class for all models."""

    type_annotation_map = {
        dict[str, Any]: JSONB,
    }


class PanelConnection(Base):
    """A registered Pterodactyl panel endpoint and its application API key.

    The API key is stored as submitted. ``user_id`` is an ownership marker
    that currently always holds the configured default owner.
    """

    __tablename__ = "pterodactyl_connections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(Text, nullable=False)
    panel_url: Mapped[str] = mapped_column(Text, nullable=False)
    api_key: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )


class ServerTemplate(Base):
    """Reusable provisioning configuration (egg, image, resources).

    There is no updated_at column; templates only record their creation time.
    """

    __tablename__ = "server_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str] = mapped_column(String(20), nullable=False)  # python, nodejs
    version: Mapped[str] = mapped_column(Text, nullable=False)
    egg_id: Mapped[int] = mapped_column(Integer, nullable=False)
    docker_image: Mapped[str] = mapped_column(Text, nullable=False)
    startup_command: Mapped[str] = mapped_column(Text, nullable=False)
    environment_variables: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB(none_as_null=True), nullable=True
    )

    # Resource quotas
    memory: Mapped[int] = mapped_column(Integer, nullable=False)  # MB
    disk: Mapped[int] = mapped_column(Integer, nullable=False)  # MB
    cpu: Mapped[int] = mapped_column(Integer, nullable=False)  # percent

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        CheckConstraint("memory > 0", name="ck_server_templates_memory_positive"),
        CheckConstraint("disk > 0", name="ck_server_templates_disk_positive"),
        CheckConstraint("cpu > 0", name="ck_server_templates_cpu_positive"),
    )


class CreatedServer(Base):
    """One provisioning attempt against a connection + template pair."""

    __tablename__ = "created_servers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    connection_id: Mapped[int] = mapped_column(Integer, nullable=False)
    template_id: Mapped[int] = mapped_column(Integer, nullable=False)
    pterodactyl_server_id: Mapped[int] = mapped_column(Integer, nullable=False)
    server_name: Mapped[str] = mapped_column(Text, nullable=False)
    server_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ServerStatus.CREATING.value
    )  # creating, active, failed, deleted

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    __table_args__ = (
        Index("ix_created_servers_connection_status", "connection_id", "status"),
        Index("ix_created_servers_template_id", "template_id"),
    )
