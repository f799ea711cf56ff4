"""Partial unique indexes backing the adoption invariants.

Revision ID: 002_lifecycle_guards
Revises: 001_initial
Create Date: 2026-10-09

Status checks alone cannot stop two concurrent requests that both read
"no conflicting row" before either writes. These indexes make the database
reject the second writer:
    - one pending-or-approved application per (animal, applicant)
    - one approved application per animal
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_lifecycle_guards"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_OUTSTANDING = sa.text("status IN ('pending', 'approved')")
_APPROVED = sa.text("status = 'approved'")


def upgrade() -> None:
    op.create_index(
        "uq_adoption_outstanding_per_applicant",
        "adoption_applications",
        ["animal_id", "applicant_id"],
        unique=True,
        postgresql_where=_OUTSTANDING,
        sqlite_where=_OUTSTANDING,
    )
    op.create_index(
        "uq_adoption_approved_per_animal",
        "adoption_applications",
        ["animal_id"],
        unique=True,
        postgresql_where=_APPROVED,
        sqlite_where=_APPROVED,
    )


def downgrade() -> None:
    op.drop_index("uq_adoption_approved_per_animal", "adoption_applications")
    op.drop_index("uq_adoption_outstanding_per_applicant", "adoption_applications")
