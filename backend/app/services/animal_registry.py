"""Animal Registry — reads and writes the canonical availability flag per animal.

Invariants:
    - Bound to one AsyncSession (one unit of work); never commits on its own
    - set_availability with expected=None is idempotent; with expected it is a
      compare-and-swap and reports whether the row matched
    - No cascade: availability writes touch exactly one animals row
    - Locked reads use populate_existing so a re-read never returns a stale identity-map row

Design Decisions:
    - Core UPDATE statements for availability: the WHERE clause is the guard, rowcount
      is the answer (ADR: correctness must not depend on process-local state)
"""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AnimalId
from app.core.errors import ResourceNotFoundError, ErrorContext
from app.core.lifecycle_types import AnimalSnapshot
from app.models.animal import Animal

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    "name", "species", "breed", "age_years", "age_months", "gender", "size",
    "color", "description", "personality", "special_needs", "adoption_fee",
    "is_available", "location",
})


class SqlAnimalRegistry:
    """AnimalRegistry backed by the animals table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, animal_id: AnimalId, for_update: bool = False) -> Animal:
        """Load animal or raise ResourceNotFoundError. for_update takes a row lock."""
        query = select(Animal).where(Animal.id == animal_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(
            query.execution_options(populate_existing=True),
        )
        animal = result.scalar_one_or_none()
        if not animal:
            raise ResourceNotFoundError(
                "Animal", str(animal_id),
                ErrorContext(animal_id=str(animal_id)),
            )
        return animal

    async def set_availability(
        self, animal_id: AnimalId, available: bool,
        expected: bool | None = None,
    ) -> bool:
        """Write is_available. Returns False when `expected` did not match."""
        stmt = (
            update(Animal)
            .where(Animal.id == animal_id)
            .values(
                is_available=available,
                updated_at=datetime.now(timezone.utc),
            )
        )
        if expected is not None:
            stmt = stmt.where(Animal.is_available == expected)
        result = await self.db.execute(
            stmt.execution_options(synchronize_session=False),
        )
        return result.rowcount > 0

    async def create(self, details: dict[str, Any]) -> Animal:
        animal = Animal(**details)
        self.db.add(animal)
        await self.db.flush()
        logger.info(
            f"Animal '{animal.name}' registered",
            extra={"animal_id": str(animal.id)},
        )
        return animal

    async def update_details(
        self, animal_id: AnimalId, changes: dict[str, Any],
    ) -> Animal:
        """Apply a generic edit. Caller must have cleared availability changes first."""
        animal = await self.get(animal_id, for_update=True)
        for key, value in changes.items():
            if key in EDITABLE_FIELDS:
                setattr(animal, key, value)
        await self.db.flush()
        return animal

    async def list_animals(
        self,
        available: bool | None = None,
        species: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Animal]:
        """Read-only listing, newest intake first."""
        query = select(Animal).order_by(Animal.date_added.desc())
        if available is not None:
            query = query.where(Animal.is_available == available)
        if species:
            query = query.where(Animal.species == species)
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())


def snapshot_animal(animal: Animal) -> AnimalSnapshot:
    return AnimalSnapshot(
        id=animal.id,
        name=animal.name,
        species=animal.species,
        gender=animal.gender,
        size=animal.size,
        is_available=animal.is_available,
        breed=animal.breed,
        age_years=animal.age_years,
        age_months=animal.age_months,
        color=animal.color,
        description=animal.description,
        personality=animal.personality,
        special_needs=animal.special_needs,
        adoption_fee=animal.adoption_fee,
        location=animal.location,
        date_added=animal.date_added,
        updated_at=animal.updated_at,
    )
