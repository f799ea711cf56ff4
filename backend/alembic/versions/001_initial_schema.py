"""Initial schema — animals, adoption_applications.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "animals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("species", sa.String(20), nullable=False),
        sa.Column("breed", sa.String(100), nullable=True),
        sa.Column("age_years", sa.Integer, nullable=True),
        sa.Column("age_months", sa.Integer, nullable=True),
        sa.Column("gender", sa.String(10), nullable=False),
        sa.Column("size", sa.String(20), nullable=False),
        sa.Column("color", sa.String(100), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("personality", sa.Text, nullable=True),
        sa.Column("special_needs", sa.Text, nullable=True),
        sa.Column("adoption_fee", sa.Numeric(8, 2), nullable=True, server_default="0.00"),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("date_added", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "adoption_applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "animal_id", UUID(as_uuid=True),
            sa.ForeignKey("animals.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("applicant_id", UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("housing_type", sa.String(20), nullable=False),
        sa.Column("has_yard", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("has_other_pets", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("other_pets_description", sa.Text, nullable=True),
        sa.Column("experience_with_pets", sa.Text, nullable=True),
        sa.Column("reason_for_adoption", sa.Text, nullable=True),
        sa.Column("work_schedule", sa.Text, nullable=True),
        sa.Column("emergency_contact_name", sa.String(100), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(20), nullable=True),
        sa.Column("veterinarian_name", sa.String(100), nullable=True),
        sa.Column("veterinarian_phone", sa.String(20), nullable=True),
        sa.Column("application_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("reviewed_by", UUID(as_uuid=True), nullable=True),
        sa.Column("reviewed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text, nullable=True),
    )
    op.create_index(
        "ix_adoption_applications_animal_id", "adoption_applications", ["animal_id"],
    )
    op.create_index(
        "ix_adoption_applications_applicant_id", "adoption_applications", ["applicant_id"],
    )
    op.create_index(
        "ix_adoption_applications_status", "adoption_applications", ["status"],
    )


def downgrade() -> None:
    op.drop_index("ix_adoption_applications_status", "adoption_applications")
    op.drop_index("ix_adoption_applications_applicant_id", "adoption_applications")
    op.drop_index("ix_adoption_applications_animal_id", "adoption_applications")
    op.drop_table("adoption_applications")
    op.drop_table("animals")
