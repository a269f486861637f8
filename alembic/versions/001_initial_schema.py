"""Initial schema: panel connections, server templates, created servers.

created_servers references connections and templates through plain integer
columns; no foreign-key constraints are declared.

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- pterodactyl_connections ---
    op.create_table(
        "pterodactyl_connections",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Text, nullable=False),
        sa.Column("panel_url", sa.Text, nullable=False),
        sa.Column("api_key", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # --- server_templates ---
    op.create_table(
        "server_templates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("language", sa.String(20), nullable=False),
        sa.Column("version", sa.Text, nullable=False),
        sa.Column("egg_id", sa.Integer, nullable=False),
        sa.Column("docker_image", sa.Text, nullable=False),
        sa.Column("startup_command", sa.Text, nullable=False),
        sa.Column("environment_variables", postgresql.JSONB(none_as_null=True), nullable=True),
        sa.Column("memory", sa.Integer, nullable=False),
        sa.Column("disk", sa.Integer, nullable=False),
        sa.Column("cpu", sa.Integer, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("memory > 0", name="ck_server_templates_memory_positive"),
        sa.CheckConstraint("disk > 0", name="ck_server_templates_disk_positive"),
        sa.CheckConstraint("cpu > 0", name="ck_server_templates_cpu_positive"),
    )

    # --- created_servers ---
    op.create_table(
        "created_servers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("connection_id", sa.Integer, nullable=False),
        sa.Column("template_id", sa.Integer, nullable=False),
        sa.Column("pterodactyl_server_id", sa.Integer, nullable=False),
        sa.Column("server_name", sa.Text, nullable=False),
        sa.Column("server_url", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="creating"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_created_servers_connection_status",
        "created_servers",
        ["connection_id", "status"],
    )
    op.create_index("ix_created_servers_template_id", "created_servers", ["template_id"])


def downgrade() -> None:
    op.drop_index("ix_created_servers_template_id", table_name="created_servers")
    op.drop_index("ix_created_servers_connection_status", table_name="created_servers")
    op.drop_table("created_servers")
    op.drop_table("server_templates")
    op.drop_table("pterodactyl_connections")
