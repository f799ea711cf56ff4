"""Boundary Protocols — contracts between the lifecycle coordinator and storage.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations are bound to one open unit of work (one transaction)
    - for_update=True takes a row lock that lasts until the unit commits or rolls back

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy (ADR: ExMA anti-pattern)
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the rules in adoption_rules are never async themselves;
      the coordinator orchestrates the async calls around the pure logic
    - Guarded writes take an `expected` value and report whether the row matched,
      so a concurrent writer is detected at write time, not only at read time
"""

from datetime import datetime
from typing import Any, Protocol

from app.core.domain_types import (
    AnimalId, ApplicationId, UserId, ApplicationStatus,
)


class AnimalLike(Protocol):
    """Structural contract for Animal rows handed to the coordinator."""
    id: AnimalId
    is_available: bool


class ApplicationLike(Protocol):
    """Structural contract for Application rows handed to the coordinator."""
    id: ApplicationId
    animal_id: AnimalId
    applicant_id: UserId
    status: str


class AnimalRegistry(Protocol):
    """Owns the canonical availability flag per animal."""
    async def get(
        self, animal_id: AnimalId, for_update: bool = False,
    ) -> AnimalLike: ...
    async def set_availability(
        self, animal_id: AnimalId, available: bool,
        expected: bool | None = None,
    ) -> bool: ...
    async def update_details(
        self, animal_id: AnimalId, changes: dict[str, Any],
    ) -> AnimalLike: ...


class ApplicationLedger(Protocol):
    """Owns adoption-application records and their raw status writes."""
    async def create(
        self, animal_id: AnimalId, applicant_id: UserId,
        details: dict[str, Any],
    ) -> ApplicationLike: ...
    async def get(
        self, application_id: ApplicationId, for_update: bool = False,
    ) -> ApplicationLike: ...
    async def update_status(
        self,
        application_id: ApplicationId,
        new_status: ApplicationStatus,
        reviewer_id: UserId,
        notes: str | None,
        reviewed_at: datetime,
        expected_status: ApplicationStatus | None = None,
    ) -> bool: ...
    async def reject_pending_siblings(
        self,
        animal_id: AnimalId,
        exclude_id: ApplicationId,
        reviewer_id: UserId,
        reviewed_at: datetime,
    ) -> list[ApplicationId]: ...
    async def has_approved(self, animal_id: AnimalId) -> bool: ...
    async def delete(self, application_id: ApplicationId) -> None: ...
