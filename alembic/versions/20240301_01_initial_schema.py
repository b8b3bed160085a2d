"""persons, locations, schedules and check-area reports

Revision ID: 20240301_01
Revises:
Create Date: 2024-03-01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20240301_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "persons",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(length=128), nullable=False, server_default=""),
        sa.Column("id_number", sa.String(length=64), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="GUARD"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_persons_id", "persons", ["id"])
    op.create_index("ix_persons_username", "persons", ["username"], unique=True)
    op.create_index("ix_persons_role", "persons", ["role"])

    op.create_table(
        "locations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("building", sa.String(length=32), nullable=True),
        sa.Column("qr_code_data", sa.String(length=512), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_locations_qr_code_data", "locations", ["qr_code_data"], unique=True)

    op.create_table(
        "schedules",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("schedule_date", sa.Date(), nullable=False),
        sa.Column(
            "person_id",
            sa.String(length=36),
            sa.ForeignKey("persons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("schedule_date", "person_id", "location_id", name="uq_schedules_date_person_location"),
    )
    op.create_index("ix_schedules_schedule_date", "schedules", ["schedule_date"])
    op.create_index("ix_schedules_person_id", "schedules", ["person_id"])
    op.create_index("ix_schedules_location_id", "schedules", ["location_id"])

    op.create_table(
        "check_area_reports",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "person_id",
            sa.String(length=36),
            sa.ForeignKey("persons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("photo_url", sa.String(length=1024), nullable=False),
        sa.Column("storage_path", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_check_area_reports_person_id", "check_area_reports", ["person_id"])
    op.create_index("ix_check_area_reports_created_at", "check_area_reports", ["created_at"])
    op.create_index(
        "ix_check_area_reports_location_created",
        "check_area_reports",
        ["location_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_check_area_reports_location_created", table_name="check_area_reports")
    op.drop_index("ix_check_area_reports_created_at", table_name="check_area_reports")
    op.drop_index("ix_check_area_reports_person_id", table_name="check_area_reports")
    op.drop_table("check_area_reports")
    op.drop_index("ix_schedules_location_id", table_name="schedules")
    op.drop_index("ix_schedules_person_id", table_name="schedules")
    op.drop_index("ix_schedules_schedule_date", table_name="schedules")
    op.drop_table("schedules")
    op.drop_index("ix_locations_qr_code_data", table_name="locations")
    op.drop_table("locations")
    op.drop_index("ix_persons_role", table_name="persons")
    op.drop_index("ix_persons_username", table_name="persons")
    op.drop_index("ix_persons_id", table_name="persons")
    op.drop_table("persons")
