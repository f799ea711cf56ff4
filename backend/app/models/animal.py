"""Animal ORM — persists a shelter resident and its adoption availability.

Invariants:
    - id is UUID primary key
    - is_available is the single source of truth for adoptability
    - is_available is written only through AnimalRegistry under a coordinator unit of work

Design Decisions:
    - Descriptive columns mirror the shelter intake form; only is_available takes part
      in the adoption invariants
    - applications relationship is passive_deletes: the FK cascade removes rows in the DB
    - Relationships are lazy="raise": an async session must never load implicitly
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Text, Integer, Boolean, Numeric, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Animal(Base):
    """Shelter resident eligible for adoption."""
    __tablename__ = "animals"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    species: Mapped[str] = mapped_column(String(20), nullable=False)
    breed: Mapped[str | None] = mapped_column(String(100), nullable=True)
    age_years: Mapped[int | None] = mapped_column(Integer, nullable=True)
    age_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    size: Mapped[str] = mapped_column(String(20), nullable=False)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    personality: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_needs: Mapped[str | None] = mapped_column(Text, nullable=True)
    adoption_fee: Mapped[Decimal | None] = mapped_column(
        Numeric(8, 2), nullable=True, default=Decimal("0.00"),
    )
    is_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    applications: Mapped[list["AdoptionApplication"]] = relationship(
        "AdoptionApplication", back_populates="animal",
        passive_deletes=True, lazy="raise",
    )
