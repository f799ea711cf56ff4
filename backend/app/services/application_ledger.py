"""Application Ledger — adoption-application records and their raw status writes.

Invariants:
    - Bound to one AsyncSession (one unit of work); never commits on its own
    - create() holds the animal row lock across the availability check, the duplicate
      check, and the INSERT: one atomic unit relative to concurrent creations
    - A unique-index violation at INSERT is the same Conflict as the duplicate check
    - update_status() enforces no lifecycle rule: only the coordinator calls it
    - reject_pending_siblings() writes the fixed cascade note on every row it touches

Design Decisions:
    - Depends on AnimalRegistry for the animal read, never queries animals directly
      (ADR: Registry owns the animals table)
    - Guarded UPDATEs (expected_status) so a status changed underneath us is detected
      even on engines that ignore FOR UPDATE
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select, update, delete, func, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.adoption_rules import CASCADE_REJECTION_NOTE, validate_new_application
from app.core.domain_types import (
    AnimalId, ApplicationId, UserId, ApplicationStatus, OUTSTANDING_STATUSES,
)
from app.core.errors import (
    ResourceNotFoundError, DuplicateApplicationError, ErrorContext,
)
from app.core.lifecycle_types import ApplicationSnapshot
from app.core.repository_protocols import AnimalRegistry
from app.models.adoption_application import AdoptionApplication

logger = logging.getLogger(__name__)

_OUTSTANDING_VALUES = [s.value for s in OUTSTANDING_STATUSES]


class SqlApplicationLedger:
    """ApplicationLedger backed by the adoption_applications table."""

    def __init__(self, db: AsyncSession, registry: AnimalRegistry):
        self.db = db
        self.registry = registry

    async def create(
        self,
        animal_id: AnimalId,
        applicant_id: UserId,
        details: dict[str, Any],
    ) -> AdoptionApplication:
        """Insert a pending application after availability and duplicate checks."""
        context = ErrorContext(
            animal_id=str(animal_id), actor_id=str(applicant_id),
        )
        animal = await self.registry.get(animal_id, for_update=True)
        outstanding = await self.has_outstanding(animal_id, applicant_id)
        error = validate_new_application(animal.is_available, outstanding)
        if error:
            error.context = context
            raise error

        application = AdoptionApplication(
            animal_id=animal_id,
            applicant_id=applicant_id,
            status=ApplicationStatus.PENDING.value,
            **details,
        )
        self.db.add(application)
        try:
            await self.db.flush()
        except IntegrityError as e:
            logger.warning(
                f"Duplicate application rejected by unique index: {e.orig}",
                extra={"animal_id": str(animal_id)},
            )
            raise DuplicateApplicationError(context)
        return application

    async def get(
        self, application_id: ApplicationId, for_update: bool = False,
    ) -> AdoptionApplication:
        """Load application or raise ResourceNotFoundError."""
        query = select(AdoptionApplication).where(
            AdoptionApplication.id == application_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(
            query.execution_options(populate_existing=True),
        )
        application = result.scalar_one_or_none()
        if not application:
            raise ResourceNotFoundError(
                "Application", str(application_id),
                ErrorContext(application_id=str(application_id)),
            )
        return application

    async def list_for(
        self,
        animal_id: AnimalId | None = None,
        applicant_id: UserId | None = None,
        status: ApplicationStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[AdoptionApplication]:
        """Read-only listing for reporting, newest first."""
        query = self._filtered(
            select(AdoptionApplication), animal_id, applicant_id, status,
        ).order_by(AdoptionApplication.application_date.desc())
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def count_for(
        self,
        animal_id: AnimalId | None = None,
        applicant_id: UserId | None = None,
        status: ApplicationStatus | None = None,
    ) -> int:
        query = self._filtered(
            select(func.count()).select_from(AdoptionApplication),
            animal_id, applicant_id, status,
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def update_status(
        self,
        application_id: ApplicationId,
        new_status: ApplicationStatus,
        reviewer_id: UserId,
        notes: str | None,
        reviewed_at: datetime,
        expected_status: ApplicationStatus | None = None,
    ) -> bool:
        """Raw status write. Returns False when expected_status did not match."""
        stmt = (
            update(AdoptionApplication)
            .where(AdoptionApplication.id == application_id)
            .values(
                status=new_status.value,
                reviewed_by=reviewer_id,
                reviewed_at=reviewed_at,
                admin_notes=notes,
            )
        )
        if expected_status is not None:
            stmt = stmt.where(
                AdoptionApplication.status == expected_status.value,
            )
        result = await self.db.execute(
            stmt.execution_options(synchronize_session=False),
        )
        return result.rowcount > 0

    async def reject_pending_siblings(
        self,
        animal_id: AnimalId,
        exclude_id: ApplicationId,
        reviewer_id: UserId,
        reviewed_at: datetime,
    ) -> list[ApplicationId]:
        """Cascading rejection of every other pending application on the animal."""
        result = await self.db.execute(
            select(AdoptionApplication.id)
            .where(AdoptionApplication.animal_id == animal_id)
            .where(AdoptionApplication.id != exclude_id)
            .where(AdoptionApplication.status == ApplicationStatus.PENDING.value)
            .with_for_update(),
        )
        sibling_ids = list(result.scalars().all())
        if not sibling_ids:
            return []
        await self.db.execute(
            update(AdoptionApplication)
            .where(AdoptionApplication.id.in_(sibling_ids))
            .where(AdoptionApplication.status == ApplicationStatus.PENDING.value)
            .values(
                status=ApplicationStatus.REJECTED.value,
                reviewed_by=reviewer_id,
                reviewed_at=reviewed_at,
                admin_notes=CASCADE_REJECTION_NOTE,
            )
            .execution_options(synchronize_session=False),
        )
        return sibling_ids

    async def has_outstanding(
        self, animal_id: AnimalId, applicant_id: UserId,
    ) -> bool:
        """Pending or approved application exists for (animal, applicant)."""
        result = await self.db.execute(
            select(exists().where(
                AdoptionApplication.animal_id == animal_id,
                AdoptionApplication.applicant_id == applicant_id,
                AdoptionApplication.status.in_(_OUTSTANDING_VALUES),
            )),
        )
        return bool(result.scalar())

    async def has_approved(self, animal_id: AnimalId) -> bool:
        result = await self.db.execute(
            select(exists().where(
                AdoptionApplication.animal_id == animal_id,
                AdoptionApplication.status == ApplicationStatus.APPROVED.value,
            )),
        )
        return bool(result.scalar())

    async def delete(self, application_id: ApplicationId) -> None:
        await self.db.execute(
            delete(AdoptionApplication)
            .where(AdoptionApplication.id == application_id)
            .execution_options(synchronize_session=False),
        )

    @staticmethod
    def _filtered(query, animal_id, applicant_id, status):
        if animal_id:
            query = query.where(AdoptionApplication.animal_id == animal_id)
        if applicant_id:
            query = query.where(AdoptionApplication.applicant_id == applicant_id)
        if status:
            query = query.where(AdoptionApplication.status == status.value)
        return query


def snapshot_application(application: AdoptionApplication) -> ApplicationSnapshot:
    return ApplicationSnapshot(
        id=application.id,
        animal_id=application.animal_id,
        applicant_id=application.applicant_id,
        status=ApplicationStatus(application.status),
        housing_type=application.housing_type,
        has_yard=application.has_yard,
        has_other_pets=application.has_other_pets,
        other_pets_description=application.other_pets_description,
        experience_with_pets=application.experience_with_pets,
        reason_for_adoption=application.reason_for_adoption,
        work_schedule=application.work_schedule,
        emergency_contact_name=application.emergency_contact_name,
        emergency_contact_phone=application.emergency_contact_phone,
        veterinarian_name=application.veterinarian_name,
        veterinarian_phone=application.veterinarian_phone,
        application_date=application.application_date,
        reviewed_by=application.reviewed_by,
        reviewed_at=application.reviewed_at,
        admin_notes=application.admin_notes,
    )
