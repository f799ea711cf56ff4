"""Service test fixtures — async DB, coordinator, and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched: coordinator units of work open sessions through it
    - Seed helpers commit immediately so coordinator sessions see the rows

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for lifecycle tests
      (FOR UPDATE is a no-op there; the guarded updates carry the invariants)
    - Verification reads go through a fresh session with populate_existing, never
      through objects cached from seeding
"""

from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.models.animal import Animal
from app.models.adoption_application import AdoptionApplication
from app.services.lifecycle_coordinator import LifecycleCoordinator
import app.infrastructure.database as db_module
from app.main import app

APPLICATION_DETAILS = {
    "housing_type": "house",
    "has_yard": True,
    "has_other_pets": False,
    "other_pets_description": None,
    "experience_with_pets": "Grew up with two retrievers",
    "reason_for_adoption": "Looking for a running companion",
    "work_schedule": "Remote, nine to five",
    "emergency_contact_name": "Dana Reyes",
    "emergency_contact_phone": "+1 555 010 2030",
    "veterinarian_name": None,
    "veterinarian_phone": None,
}


def build_manager(engine, session_factory) -> DatabaseSessionManager:
    """DatabaseSessionManager bound to a test engine, bypassing pool settings."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = session_factory
    return manager


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine, test_session_factory):
    return build_manager(test_engine, test_session_factory)


@pytest.fixture
def coordinator(db_manager):
    return LifecycleCoordinator(
        db_manager,
        timeout_seconds=5.0,
        max_retries=2,
        base_delay_ms=1,
        max_delay_ms=5,
    )


@pytest.fixture
async def client(test_session_factory, db_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed & fetch helpers ────────────────────────────────────────

@pytest.fixture
def make_animal(test_session_factory):
    """Insert an animal directly into the test DB."""
    async def _make(**overrides) -> Animal:
        fields = {
            "name": "Biscuit", "species": "dog", "gender": "male",
            "size": "medium", "is_available": True,
        }
        fields.update(overrides)
        async with test_session_factory() as session:
            animal = Animal(**fields)
            session.add(animal)
            await session.commit()
            return animal
    return _make


@pytest.fixture
def make_application(test_session_factory):
    """Insert an application directly, bypassing the lifecycle checks."""
    async def _make(animal_id, applicant_id=None, status="pending", **overrides):
        fields = dict(APPLICATION_DETAILS)
        fields.update(overrides)
        async with test_session_factory() as session:
            application = AdoptionApplication(
                animal_id=animal_id,
                applicant_id=applicant_id or uuid4(),
                status=status,
                **fields,
            )
            session.add(application)
            await session.commit()
            return application
    return _make


@pytest.fixture
def fetch(test_session_factory):
    """Re-read a row by primary key from a fresh session."""
    async def _fetch(model, row_id):
        async with test_session_factory() as session:
            result = await session.execute(
                select(model)
                .where(model.id == row_id)
                .execution_options(populate_existing=True),
            )
            return result.scalar_one_or_none()
    return _fetch


@pytest.fixture
def staff_headers():
    return {"X-Actor-Id": str(uuid4()), "X-Actor-Role": "admin"}


@pytest.fixture
def volunteer_headers():
    return {"X-Actor-Id": str(uuid4()), "X-Actor-Role": "volunteer"}


@pytest.fixture
def user_headers():
    return {"X-Actor-Id": str(uuid4()), "X-Actor-Role": "user"}
