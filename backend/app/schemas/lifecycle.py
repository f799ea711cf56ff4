"""Lifecycle Schemas — response envelopes for coordinator operations."""

from uuid import UUID

from pydantic import BaseModel

from app.core.domain_types import ApplicationStatus
from app.schemas.adoption import ApplicationResponse
from app.schemas.animal import AnimalResponse


class TransitionResponse(BaseModel):
    message: str
    application: ApplicationResponse
    animal: AnimalResponse
    previous_status: ApplicationStatus
    cascaded_application_ids: list[UUID]


class WithdrawResponse(BaseModel):
    message: str
    application_id: UUID
    animal_available: bool
