"""Lifecycle Concurrency — verifies invariants under truly concurrent units of work.

Tests cover:
    - Concurrent approvals for one animal: exactly one wins, the rest get Conflict
    - Loser writes nothing of its own; the winner's cascade rejects it
    - Concurrent duplicate submissions: exactly one row is created

Design Decisions:
    - File-backed SQLite (tmp_path) so each unit of work gets its own connection;
      the in-memory engine shares one connection and would serialize everything
    - Short backoff with generous retries: "database is locked" surfaces as
      DatabaseError and is retried like any Unavailable failure
"""

import asyncio
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from app.core.domain_types import ApplicationStatus
from app.core.errors import ConflictError
from app.core.lifecycle_types import (
    ApplicationSnapshot, SubmitApplication, TransitionCommand, TransitionResult,
)
from app.db.base import Base
from app.infrastructure.database import DatabaseSessionManager
from app.models.adoption_application import AdoptionApplication
from app.models.animal import Animal
from app.services.lifecycle_coordinator import LifecycleCoordinator

QUESTIONNAIRE = {
    "housing_type": "apartment",
    "has_yard": False,
    "has_other_pets": False,
    "experience_with_pets": "First dog, lots of reading",
    "reason_for_adoption": "Quiet home, lots of walks",
    "work_schedule": "Hybrid",
    "emergency_contact_name": "Lee Park",
    "emergency_contact_phone": "+44 20 7946 0958",
}


@pytest.fixture
async def race_manager(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'shelter.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
    yield manager
    await engine.dispose()


@pytest.fixture
def race_coordinator(race_manager):
    return LifecycleCoordinator(
        race_manager,
        timeout_seconds=30.0,
        max_retries=8,
        base_delay_ms=5,
        max_delay_ms=100,
    )


async def seed(manager, applications: int):
    async with manager.unit_of_work() as db:
        animal = Animal(name="Juniper", species="dog", gender="female", size="large")
        db.add(animal)
        await db.flush()
        rows = [
            AdoptionApplication(animal_id=animal.id, applicant_id=uuid4(), **QUESTIONNAIRE)
            for _ in range(applications)
        ]
        db.add_all(rows)
    return animal.id, [row.id for row in rows]


async def statuses(manager, animal_id):
    async with manager.session() as db:
        result = await db.execute(
            select(AdoptionApplication.status, func.count())
            .where(AdoptionApplication.animal_id == animal_id)
            .group_by(AdoptionApplication.status),
        )
        counts = dict(result.all())
        animal = await db.get(Animal, animal_id)
        return counts, animal.is_available


async def test_concurrent_approvals_admit_exactly_one(race_manager, race_coordinator):
    animal_id, application_ids = await seed(race_manager, applications=2)

    results = await asyncio.gather(
        *[
            race_coordinator.transition(TransitionCommand(
                app_id, ApplicationStatus.APPROVED, uuid4(), None, True,
            ))
            for app_id in application_ids
        ],
        return_exceptions=True,
    )

    winners = [r for r in results if isinstance(r, TransitionResult)]
    losers = [r for r in results if not isinstance(r, TransitionResult)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], ConflictError)

    counts, available = await statuses(race_manager, animal_id)
    assert counts == {"approved": 1, "rejected": 1}
    assert available is False


async def test_many_concurrent_approvals(race_manager, race_coordinator):
    animal_id, application_ids = await seed(race_manager, applications=4)

    results = await asyncio.gather(
        *[
            race_coordinator.transition(TransitionCommand(
                app_id, ApplicationStatus.APPROVED, uuid4(), None, True,
            ))
            for app_id in application_ids
        ],
        return_exceptions=True,
    )

    assert sum(isinstance(r, TransitionResult) for r in results) == 1
    assert all(
        isinstance(r, (TransitionResult, ConflictError)) for r in results
    )
    counts, available = await statuses(race_manager, animal_id)
    assert counts == {"approved": 1, "rejected": 3}
    assert available is False


async def test_concurrent_duplicate_submissions(race_manager, race_coordinator):
    animal_id, _ = await seed(race_manager, applications=0)
    applicant = uuid4()
    submit = SubmitApplication(animal_id, applicant, dict(QUESTIONNAIRE))

    results = await asyncio.gather(
        race_coordinator.submit_application(submit),
        race_coordinator.submit_application(submit),
        return_exceptions=True,
    )

    created = [r for r in results if isinstance(r, ApplicationSnapshot)]
    refused = [r for r in results if isinstance(r, ConflictError)]
    assert len(created) == 1
    assert len(refused) == 1

    counts, available = await statuses(race_manager, animal_id)
    assert counts == {"pending": 1}
    assert available is True
