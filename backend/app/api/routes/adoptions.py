"""Adoption Routes — submit, review, withdraw, and list adoption applications.

Invariants:
    - Every write goes through LifecycleCoordinator; routes never touch status or availability
    - Request bodies are validated by Pydantic before a core command is built
    - Regular users see and withdraw only their own applications; staff see all
    - GET endpoints are read-only reporting over the same tables

Design Decisions:
    - Domain errors raised as ShelterError and rendered by the global handler
      (ADR: one error envelope for every route)
    - Staff decision computed from the actor and passed as a bool: core never sees roles
"""

import logging
import math
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Actor, get_actor, get_coordinator
from app.core.domain_types import AnimalId, ApplicationId, ApplicationStatus
from app.core.errors import ForbiddenError
from app.core.lifecycle_types import (
    SubmitApplication, TransitionCommand, WithdrawCommand,
)
from app.infrastructure.database import get_db
from app.schemas.adoption import (
    ApplicationCreate, ApplicationList, ApplicationResponse, Pagination, StatusUpdate,
)
from app.schemas.animal import AnimalResponse
from app.schemas.lifecycle import TransitionResponse, WithdrawResponse
from app.services.animal_registry import SqlAnimalRegistry
from app.services.application_ledger import SqlApplicationLedger, snapshot_application
from app.services.lifecycle_coordinator import LifecycleCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/adoptions", tags=["adoptions"])


@router.post(
    "", response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    body: ApplicationCreate,
    actor: Actor = Depends(get_actor),
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Submit an adoption application as the calling actor."""
    snapshot = await coordinator.submit_application(
        SubmitApplication(
            animal_id=AnimalId(body.animal_id),
            applicant_id=actor.id,
            details=body.details(),
        ),
    )
    return ApplicationResponse.model_validate(snapshot)


@router.get("", response_model=ApplicationList)
async def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    status_filter: ApplicationStatus | None = Query(None, alias="status"),
    animal_id: UUID | None = Query(None),
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """List applications with pagination. Users get their own, staff get all."""
    ledger = SqlApplicationLedger(db, SqlAnimalRegistry(db))
    filters = {
        "animal_id": AnimalId(animal_id) if animal_id else None,
        "applicant_id": None if actor.is_staff else actor.id,
        "status": status_filter,
    }
    total = await ledger.count_for(**filters)
    rows = await ledger.list_for(
        **filters, limit=limit, offset=(page - 1) * limit,
    )
    return ApplicationList(
        applications=[
            ApplicationResponse.model_validate(snapshot_application(row))
            for row in rows
        ],
        pagination=Pagination(
            current_page=page,
            per_page=limit,
            total_items=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Get one application. Applicants may only read their own."""
    ledger = SqlApplicationLedger(db, SqlAnimalRegistry(db))
    application = await ledger.get(ApplicationId(application_id))
    if not actor.is_staff and application.applicant_id != actor.id:
        raise ForbiddenError("Access denied")
    return ApplicationResponse.model_validate(snapshot_application(application))


@router.put("/{application_id}/status", response_model=TransitionResponse)
async def update_application_status(
    application_id: UUID,
    body: StatusUpdate,
    actor: Actor = Depends(get_actor),
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Staff transition: approve, reject, or complete an application."""
    result = await coordinator.transition(
        TransitionCommand(
            application_id=ApplicationId(application_id),
            new_status=body.status,
            reviewer_id=actor.id,
            notes=body.admin_notes,
            staff_authorized=actor.is_staff,
        ),
    )
    return TransitionResponse(
        message=f"Application {body.status.value} successfully",
        application=ApplicationResponse.model_validate(result.application),
        animal=AnimalResponse.model_validate(result.animal),
        previous_status=result.previous_status,
        cascaded_application_ids=list(result.cascaded_application_ids),
    )


@router.delete("/{application_id}", response_model=WithdrawResponse)
async def withdraw_application(
    application_id: UUID,
    actor: Actor = Depends(get_actor),
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Delete an application: applicants their own pending ones, staff any."""
    result = await coordinator.withdraw_application(
        WithdrawCommand(
            application_id=ApplicationId(application_id),
            actor_id=actor.id,
            staff_authorized=actor.is_staff,
        ),
    )
    return WithdrawResponse(
        message="Application deleted successfully",
        application_id=result.application_id,
        animal_available=result.animal.is_available,
    )
