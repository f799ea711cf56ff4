"""Lifecycle Coordinator — executes adoption status transitions as single atomic units of work.

Invariants:
    - Every operation runs inside one DB transaction: all writes commit together or none do
    - Lock order is always animal row, then application row(s): approvals of sibling
      applications serialize on the animal and the cascade never waits on a lock held
      by a sibling transaction
    - Every invariant-touching write is guarded (compare-and-swap); a zero row-count
      aborts the unit with ConcurrencyError
    - State is re-read from storage on every call; nothing is cached between calls
    - Only Unavailable failures (DatabaseError) are retried, and always in full;
      every other error surfaces to the caller unchanged
    - A timed-out unit is rolled back and reported as TransactionTimeoutError

Design Decisions:
    - Pure rules (core/adoption_rules) decide, this module only orchestrates IO around
      them (ADR: ExMA impureim sandwich)
    - Row locks plus guarded updates: FOR UPDATE gives serialization on PostgreSQL,
      the guards keep the invariants on engines that ignore it
    - Exponential backoff with ±25% jitter between retries: prevents two losers of the
      same race from colliding again in lockstep
    - Storage handle injected at construction (ADR: no process-wide lifecycle state)
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.core import adoption_rules as rules
from app.core.domain_types import AnimalId, ApplicationId, ApplicationStatus
from app.core.errors import (
    ConcurrencyError,
    DatabaseError,
    ErrorContext,
    TransactionTimeoutError,
)
from app.core.lifecycle_types import (
    AnimalSnapshot,
    ApplicationSnapshot,
    SubmitApplication,
    TransitionCommand,
    TransitionResult,
    WithdrawCommand,
    WithdrawResult,
)
from app.infrastructure.database import DatabaseSessionManager
from app.services.animal_registry import SqlAnimalRegistry, snapshot_animal
from app.services.application_ledger import (
    SqlApplicationLedger, snapshot_application,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LifecycleCoordinator:
    """The only writer path for application status and animal availability."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        base_delay_ms: int = 50,
        max_delay_ms: int = 2_000,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.clock = clock

    # ─── Public operations ──────────────────────────────────────

    async def transition(self, command: TransitionCommand) -> TransitionResult:
        """Move one application to a new status with all cascading effects."""
        error = rules.check_staff(command.staff_authorized)
        if error:
            error.context = self._context(
                application_id=command.application_id,
                actor_id=command.reviewer_id,
            )
            raise error
        # Status as of the first attempt; retries must not forget it
        first_seen: dict[str, ApplicationStatus] = {}
        return await self._run_atomic(
            lambda db: self._apply_transition(db, command, first_seen),
            operation="transition",
        )

    async def submit_application(
        self, command: SubmitApplication,
    ) -> ApplicationSnapshot:
        """Create a pending application; availability and duplicate checks included."""
        async def work(db: AsyncSession) -> ApplicationSnapshot:
            ledger = SqlApplicationLedger(db, SqlAnimalRegistry(db))
            application = await ledger.create(
                command.animal_id, command.applicant_id, command.details,
            )
            logger.info(
                "Adoption application submitted",
                extra={
                    "application_id": str(application.id),
                    "animal_id": str(command.animal_id),
                    "actor_id": str(command.applicant_id),
                },
            )
            return snapshot_application(application)

        return await self._run_atomic(work, operation="submit_application")

    async def withdraw_application(self, command: WithdrawCommand) -> WithdrawResult:
        """Delete an application; removing the approved one returns the animal to the pool."""
        return await self._run_atomic(
            lambda db: self._apply_withdraw(db, command),
            operation="withdraw_application",
        )

    async def update_animal(
        self, animal_id: AnimalId, changes: dict[str, Any],
    ) -> AnimalSnapshot:
        """Generic animal edit; availability is off limits while an adoption is approved."""
        async def work(db: AsyncSession) -> AnimalSnapshot:
            registry = SqlAnimalRegistry(db)
            ledger = SqlApplicationLedger(db, registry)
            animal = await registry.get(animal_id, for_update=True)
            touches_availability = (
                "is_available" in changes
                and changes["is_available"] != animal.is_available
            )
            error = rules.check_availability_edit(
                touches_availability, await ledger.has_approved(animal_id),
            )
            if error:
                error.context = self._context(animal_id=animal_id)
                raise error
            animal = await registry.update_details(animal_id, changes)
            return snapshot_animal(animal)

        return await self._run_atomic(work, operation="update_animal")

    # ─── Units of work ──────────────────────────────────────────

    async def _apply_transition(
        self, db: AsyncSession, command: TransitionCommand,
        first_seen: dict[str, ApplicationStatus],
    ) -> TransitionResult:
        registry = SqlAnimalRegistry(db)
        ledger = SqlApplicationLedger(db, registry)

        unlocked = await ledger.get(command.application_id)
        first_seen.setdefault("status", ApplicationStatus(unlocked.status))
        animal_id = unlocked.animal_id
        await registry.get(animal_id, for_update=True)
        application = await ledger.get(command.application_id, for_update=True)
        # Animal read must never be older than the application read
        animal = await registry.get(animal_id)
        current = ApplicationStatus(application.status)
        target = command.new_status
        context = self._context(
            application_id=command.application_id,
            animal_id=animal_id,
            actor_id=command.reviewer_id,
        )

        adopted = (
            target == ApplicationStatus.APPROVED
            and not animal.is_available
            and await ledger.has_approved(animal_id)
        )
        error = rules.validate_transition(
            current, target, animal.is_available,
            observed=first_seen["status"], animal_adopted=adopted,
        )
        if error:
            error.context = context
            raise error
        plan = rules.plan_transition(current, target)
        now = self.clock()

        if plan.claim_animal:
            claimed = await registry.set_availability(
                animal_id, False, expected=True,
            )
            if not claimed:
                raise ConcurrencyError(
                    "Animal was claimed by a concurrent approval", context,
                )

        updated = await ledger.update_status(
            command.application_id, target, command.reviewer_id,
            command.notes, now, expected_status=current,
        )
        if not updated:
            raise ConcurrencyError(
                "Application status changed concurrently", context,
            )

        cascaded: list[ApplicationId] = []
        if plan.reject_siblings:
            cascaded = await ledger.reject_pending_siblings(
                animal_id, command.application_id, command.reviewer_id, now,
            )
        if plan.release_animal:
            await registry.set_availability(animal_id, True)

        application = await ledger.get(command.application_id)
        animal = await registry.get(animal_id)
        logger.info(
            f"Application {current.value} -> {target.value}",
            extra={
                "application_id": str(command.application_id),
                "animal_id": str(animal_id),
                "actor_id": str(command.reviewer_id),
                "from_status": current.value,
                "to_status": target.value,
                "cascaded": len(cascaded),
            },
        )
        return TransitionResult(
            application=snapshot_application(application),
            animal=snapshot_animal(animal),
            previous_status=current,
            cascaded_application_ids=tuple(cascaded),
        )

    async def _apply_withdraw(
        self, db: AsyncSession, command: WithdrawCommand,
    ) -> WithdrawResult:
        registry = SqlAnimalRegistry(db)
        ledger = SqlApplicationLedger(db, registry)

        unlocked = await ledger.get(command.application_id)
        animal_id = unlocked.animal_id
        await registry.get(animal_id, for_update=True)
        application = await ledger.get(command.application_id, for_update=True)
        status = ApplicationStatus(application.status)

        error = rules.check_can_withdraw(
            status,
            is_owner=application.applicant_id == command.actor_id,
            staff_authorized=command.staff_authorized,
        )
        if error:
            error.context = self._context(
                application_id=command.application_id,
                animal_id=animal_id,
                actor_id=command.actor_id,
            )
            raise error

        released = rules.releases_animal_on_removal(status)
        await ledger.delete(command.application_id)
        if released:
            await registry.set_availability(animal_id, True)
        animal = await registry.get(animal_id)
        logger.info(
            "Adoption application withdrawn",
            extra={
                "application_id": str(command.application_id),
                "animal_id": str(animal_id),
                "actor_id": str(command.actor_id),
                "from_status": status.value,
            },
        )
        return WithdrawResult(
            application_id=command.application_id,
            animal=snapshot_animal(animal),
            released_animal=released,
        )

    # ─── Atomic runner ──────────────────────────────────────────

    async def _run_atomic(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        operation: str,
    ) -> T:
        """Run `work` in a fresh transaction, bounded by timeout, retried on DatabaseError."""
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(
                    self._once(work), timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                logger.error(
                    f"{operation} timed out after {self.timeout_seconds}s",
                    extra={"attempt": attempt + 1},
                )
                raise TransactionTimeoutError(
                    self.timeout_seconds,
                    ErrorContext(retry_after_ms=self.max_delay_ms),
                )
            except DatabaseError as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"{operation} failed after {attempt + 1} attempts: {e.message}",
                        extra={"error_code": e.code, "attempt": attempt + 1},
                    )
                    # Client waits out at least one full backoff window
                    e.context.retry_after_ms = self.max_delay_ms
                    raise
                delay = self._backoff(attempt)
                logger.warning(
                    f"{operation} storage failure, retry after {delay}ms",
                    extra={"error_code": e.code, "attempt": attempt + 1},
                )
                await asyncio.sleep(delay / 1000)
                attempt += 1

    async def _once(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self.db.unit_of_work() as db:
            return await work(db)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    @staticmethod
    def _context(
        application_id: ApplicationId | None = None,
        animal_id: AnimalId | None = None,
        actor_id: Any = None,
    ) -> ErrorContext:
        return ErrorContext(
            application_id=str(application_id) if application_id else None,
            animal_id=str(animal_id) if animal_id else None,
            actor_id=str(actor_id) if actor_id else None,
        )
