"""API Dependencies — actor identity and coordinator wiring for route handlers.

Invariants:
    - Actor identity is asserted by the upstream auth gateway (X-Actor-Id, X-Actor-Role);
      this service never issues or verifies credentials itself
    - Staff capability = volunteer or admin role; decided here, passed into core as a bool
    - A coordinator is built per request around the process-wide db_manager

Design Decisions:
    - Headers over JWT parsing: authentication is an external collaborator
      (ADR: keep token handling out of the lifecycle service)
    - database.db_manager read at call time so tests can swap it
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Header

from app.config import get_settings
from app.core.domain_types import ActorRole, UserId, STAFF_ROLES
from app.core.errors import AuthenticationRequiredError, ForbiddenError
from app.infrastructure import database
from app.services.lifecycle_coordinator import LifecycleCoordinator


@dataclass(frozen=True)
class Actor:
    id: UserId
    role: ActorRole

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


async def get_actor(
    x_actor_id: str | None = Header(None),
    x_actor_role: str | None = Header(None),
) -> Actor:
    """Resolve the caller from gateway headers or raise 401."""
    if not x_actor_id or not x_actor_role:
        raise AuthenticationRequiredError()
    try:
        return Actor(id=UserId(UUID(x_actor_id)), role=ActorRole(x_actor_role))
    except ValueError:
        raise AuthenticationRequiredError("Actor identity headers are invalid")


def require_staff(actor: Actor) -> Actor:
    if not actor.is_staff:
        raise ForbiddenError()
    return actor


def get_coordinator() -> LifecycleCoordinator:
    """FastAPI dependency: coordinator bound to the process-wide session manager."""
    settings = get_settings()
    return LifecycleCoordinator(
        database.get_db_manager(),
        timeout_seconds=settings.lifecycle_timeout_seconds,
        max_retries=settings.lifecycle_max_retries,
        base_delay_ms=settings.lifecycle_base_delay_ms,
        max_delay_ms=settings.lifecycle_max_delay_ms,
    )
