"""Animal Schemas — intake and edit payloads for shelter residents.

Invariants:
    - AnimalCreate never accepts is_available: new animals always start available
    - AnimalUpdate must carry at least one field
    - Numeric ranges follow the intake form (age_years 0-30, age_months 0-11, fee >= 0)
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.domain_types import Species, Gender, AnimalSize

_REQUIRED_COLUMNS = ("name", "species", "gender", "size", "is_available")


class AnimalCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1, max_length=100)
    species: Species
    breed: str | None = Field(None, max_length=100)
    age_years: int | None = Field(None, ge=0, le=30)
    age_months: int | None = Field(None, ge=0, le=11)
    gender: Gender
    size: AnimalSize
    color: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=2000)
    personality: str | None = Field(None, max_length=1000)
    special_needs: str | None = Field(None, max_length=1000)
    adoption_fee: Decimal | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class AnimalUpdate(BaseModel):
    """Generic edit; is_available is accepted but guarded by the coordinator."""
    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    species: Species | None = None
    breed: str | None = Field(None, max_length=100)
    age_years: int | None = Field(None, ge=0, le=30)
    age_months: int | None = Field(None, ge=0, le=11)
    gender: Gender | None = None
    size: AnimalSize | None = None
    color: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=2000)
    personality: str | None = Field(None, max_length=1000)
    special_needs: str | None = Field(None, max_length=1000)
    adoption_fee: Decimal | None = Field(None, ge=0)
    is_available: bool | None = None
    location: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def require_some_field(self):
        if not self.model_fields_set:
            raise ValueError("No valid fields to update")
        return self

    def changes(self) -> dict:
        """Fields the client sent; explicit nulls dropped for NOT NULL columns."""
        changes = self.model_dump(exclude_unset=True)
        for key in _REQUIRED_COLUMNS:
            if changes.get(key, "") is None:
                changes.pop(key)
        return changes


class AnimalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
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
