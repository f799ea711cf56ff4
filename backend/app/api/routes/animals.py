"""Animal Routes — intake, lookup, and generic edits of shelter residents.

Invariants:
    - Edits run through LifecycleCoordinator.update_animal: is_available cannot change
      while an application for the animal is approved
    - Intake and edits require staff; reads are public

Design Decisions:
    - Intake uses a plain unit of work: a new animal has no applications, so no
      lifecycle invariant is at stake
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Actor, get_actor, get_coordinator, require_staff
from app.core.domain_types import AnimalId, Species
from app.core.errors import CommandValidationError
from app.infrastructure.database import get_db, get_db_manager, DatabaseSessionManager
from app.schemas.animal import AnimalCreate, AnimalResponse, AnimalUpdate
from app.services.animal_registry import SqlAnimalRegistry, snapshot_animal
from app.services.lifecycle_coordinator import LifecycleCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/animals", tags=["animals"])


@router.post(
    "", response_model=AnimalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_animal(
    body: AnimalCreate,
    actor: Actor = Depends(get_actor),
    db_manager: DatabaseSessionManager = Depends(get_db_manager),
):
    """Register a new animal. Starts available for adoption."""
    require_staff(actor)
    async with db_manager.unit_of_work() as db:
        animal = await SqlAnimalRegistry(db).create(body.model_dump())
        snapshot = snapshot_animal(animal)
    return AnimalResponse.model_validate(snapshot)


@router.get("", response_model=list[AnimalResponse])
async def list_animals(
    available: bool | None = Query(None),
    species: Species | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List animals, optionally only those still available."""
    animals = await SqlAnimalRegistry(db).list_animals(
        available=available,
        species=species.value if species else None,
        limit=limit,
        offset=offset,
    )
    return [AnimalResponse.model_validate(snapshot_animal(a)) for a in animals]


@router.get("/{animal_id}", response_model=AnimalResponse)
async def get_animal(
    animal_id: UUID, db: AsyncSession = Depends(get_db),
):
    animal = await SqlAnimalRegistry(db).get(AnimalId(animal_id))
    return AnimalResponse.model_validate(snapshot_animal(animal))


@router.put("/{animal_id}", response_model=AnimalResponse)
async def update_animal(
    animal_id: UUID,
    body: AnimalUpdate,
    actor: Actor = Depends(get_actor),
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Generic edit. Availability changes are refused under an approved adoption."""
    require_staff(actor)
    changes = body.changes()
    if not changes:
        raise CommandValidationError("No valid fields to update", "body")
    snapshot = await coordinator.update_animal(AnimalId(animal_id), changes)
    return AnimalResponse.model_validate(snapshot)
