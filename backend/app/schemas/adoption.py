"""Adoption Schemas — Pydantic models with field-level validation for application endpoints.

Invariants:
    - ApplicationCreate mirrors the shelter questionnaire limits (lengths, phone format)
    - StatusUpdate.status is one of the four lifecycle states; legality is decided later
    - Enum values stored as plain strings (use_enum_values) so they bind to String columns

Design Decisions:
    - field_validator for side-effect-free transforms (strip); models stay pure
    - Responses built from core snapshots via from_attributes, never from ORM rows
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import ApplicationStatus, HousingType

PHONE_PATTERN = r"^\+?[0-9][0-9\s\-().]{6,19}$"


class ApplicationCreate(BaseModel):
    """Adoption application submission."""
    model_config = ConfigDict(use_enum_values=True)

    animal_id: UUID
    housing_type: HousingType
    has_yard: bool
    has_other_pets: bool
    other_pets_description: str | None = Field(None, max_length=1000)
    experience_with_pets: str = Field(min_length=10, max_length=1000)
    reason_for_adoption: str = Field(min_length=10, max_length=1000)
    work_schedule: str = Field(min_length=5, max_length=500)
    emergency_contact_name: str = Field(min_length=2, max_length=100)
    emergency_contact_phone: str = Field(pattern=PHONE_PATTERN)
    veterinarian_name: str | None = Field(None, max_length=100)
    veterinarian_phone: str | None = Field(None, pattern=PHONE_PATTERN)

    @field_validator(
        "experience_with_pets", "reason_for_adoption", "work_schedule",
        "emergency_contact_name",
    )
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty or whitespace")
        return v

    def details(self) -> dict:
        """Questionnaire columns, without the animal reference."""
        return self.model_dump(exclude={"animal_id"})


class StatusUpdate(BaseModel):
    """Staff status change for one application."""
    status: ApplicationStatus
    admin_notes: str | None = Field(None, max_length=1000)


class ApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    animal_id: UUID
    applicant_id: UUID
    status: ApplicationStatus
    housing_type: str
    has_yard: bool
    has_other_pets: bool
    other_pets_description: str | None = None
    experience_with_pets: str | None = None
    reason_for_adoption: str | None = None
    work_schedule: str | None = None
    emergency_contact_name: str | None = None
    emergency_contact_phone: str | None = None
    veterinarian_name: str | None = None
    veterinarian_phone: str | None = None
    application_date: datetime | None = None
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    admin_notes: str | None = None


class Pagination(BaseModel):
    current_page: int
    per_page: int
    total_items: int
    total_pages: int


class ApplicationList(BaseModel):
    applications: list[ApplicationResponse]
    pagination: Pagination
