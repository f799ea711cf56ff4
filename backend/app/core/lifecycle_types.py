"""Lifecycle Types — typed commands in, frozen snapshots out of the coordinator.

Invariants:
    - Commands are built once at the API boundary from validated pydantic bodies
    - Snapshots are immutable copies taken before commit, never live ORM rows
    - staff_authorized is the external authorization decision, not derived here

Design Decisions:
    - Frozen dataclasses over pydantic: core stays free of serialization concerns
      (ADR: DDD boundary, schemas/ owns the wire shape)
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.core.domain_types import (
    AnimalId, ApplicationId, UserId, ApplicationStatus,
)


# ─── Commands ────────────────────────────────────────────────────

@dataclass(frozen=True)
class SubmitApplication:
    animal_id: AnimalId
    applicant_id: UserId
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TransitionCommand:
    application_id: ApplicationId
    new_status: ApplicationStatus
    reviewer_id: UserId
    notes: str | None
    staff_authorized: bool


@dataclass(frozen=True)
class WithdrawCommand:
    application_id: ApplicationId
    actor_id: UserId
    staff_authorized: bool


# ─── Snapshots ───────────────────────────────────────────────────

@dataclass(frozen=True)
class AnimalSnapshot:
    id: AnimalId
    name: str
    species: str
    gender: str
    size: str
    is_available: bool
    breed: str | None = None
    age_years: int | None = None
    age_months: int | None = None
    color: str | None = None
    description: str | None = None
    personality: str | None = None
    special_needs: str | None = None
    adoption_fee: Decimal | None = None
    location: str | None = None
    date_added: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ApplicationSnapshot:
    id: ApplicationId
    animal_id: AnimalId
    applicant_id: UserId
    status: ApplicationStatus
    housing_type: str
    has_yard: bool
    has_other_pets: bool
    other_pets_description: str | None
    experience_with_pets: str | None
    reason_for_adoption: str | None
    work_schedule: str | None
    emergency_contact_name: str | None
    emergency_contact_phone: str | None
    veterinarian_name: str | None
    veterinarian_phone: str | None
    application_date: datetime | None
    reviewed_by: UserId | None
    reviewed_at: datetime | None
    admin_notes: str | None


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of one committed transition."""
    application: ApplicationSnapshot
    animal: AnimalSnapshot
    previous_status: ApplicationStatus
    cascaded_application_ids: tuple[ApplicationId, ...] = ()


@dataclass(frozen=True)
class WithdrawResult:
    application_id: ApplicationId
    animal: AnimalSnapshot
    released_animal: bool
