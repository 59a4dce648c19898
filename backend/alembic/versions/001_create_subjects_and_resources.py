"""Create subjects and resources tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: `subjects` (with slug and resource_count) and
       `resources` (subject referenced by name, view/download counters).
Rollback: downgrade() drops both tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "subjects",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(64), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("resource_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("resource_count >= 0", name="ck_subjects_resource_count_non_negative"),
    )
    op.create_index("ix_subjects_name", "subjects", ["name"])
    op.create_index("ix_subjects_slug", "subjects", ["slug"], unique=True)
    op.create_index("ix_subjects_category", "subjects", ["category"])

    op.create_table(
        "resources",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("link", sa.String(2048), nullable=True),
        sa.Column("file_size", sa.String(50), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("downloads >= 0", name="ck_resources_downloads_non_negative"),
        sa.CheckConstraint("views >= 0", name="ck_resources_views_non_negative"),
    )
    op.create_index("ix_resources_subject", "resources", ["subject"])
    op.create_index("ix_resources_type", "resources", ["type"])
    op.create_index("ix_resources_year", "resources", ["year"])
    op.create_index("idx_resources_created_at", "resources", [sa.text("created_at DESC")])


def downgrade() -> None:
    op.drop_index("idx_resources_created_at", table_name="resources")
    op.drop_index("ix_resources_year", table_name="resources")
    op.drop_index("ix_resources_type", table_name="resources")
    op.drop_index("ix_resources_subject", table_name="resources")
    op.drop_table("resources")

    op.drop_index("ix_subjects_category", table_name="subjects")
    op.drop_index("ix_subjects_slug", table_name="subjects")
    op.drop_index("ix_subjects_name", table_name="subjects")
    op.drop_table("subjects")
