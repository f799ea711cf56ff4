"""AdoptionApplication ORM — one applicant's request to adopt one animal.

Invariants:
    - Always belongs to an Animal (animal_id FK, ON DELETE CASCADE)
    - status in {pending, approved, rejected, completed}; created as pending
    - reviewed_by / reviewed_date / admin_notes written only by staff transitions
    - At most one pending-or-approved row per (animal_id, applicant_id)
    - At most one approved row per animal_id

Design Decisions:
    - Both invariants also enforced by partial unique indexes: a lost race fails at
      INSERT/UPDATE instead of leaving two claims (ADR: storage is the arbiter)
    - applicant_id / reviewed_by are opaque user ids without FK: users live in the
      identity service, not in this schema
    - reviewed_at attribute mapped onto the legacy reviewed_date column
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, Boolean, DateTime, ForeignKey, Index, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base

_OUTSTANDING = text("status IN ('pending', 'approved')")
_APPROVED = text("status = 'approved'")


class AdoptionApplication(Base):
    """Adoption application entity with a staff-driven status lifecycle."""
    __tablename__ = "adoption_applications"
    __table_args__ = (
        Index(
            "uq_adoption_outstanding_per_applicant",
            "animal_id", "applicant_id",
            unique=True,
            postgresql_where=_OUTSTANDING,
            sqlite_where=_OUTSTANDING,
        ),
        Index(
            "uq_adoption_approved_per_animal",
            "animal_id",
            unique=True,
            postgresql_where=_APPROVED,
            sqlite_where=_APPROVED,
        ),
        Index("ix_adoption_applications_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    animal_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("animals.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    applicant_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )

    # Applicant questionnaire
    housing_type: Mapped[str] = mapped_column(String(20), nullable=False)
    has_yard: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    has_other_pets: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    other_pets_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_with_pets: Mapped[str | None] = mapped_column(Text, nullable=True)
    reason_for_adoption: Mapped[str | None] = mapped_column(Text, nullable=True)
    work_schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
    )
    emergency_contact_phone: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
    )
    veterinarian_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
    )
    veterinarian_phone: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
    )
    application_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Staff review
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        "reviewed_date", DateTime(timezone=True), nullable=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    animal: Mapped["Animal"] = relationship(
        "Animal", back_populates="applications", lazy="raise",
    )
