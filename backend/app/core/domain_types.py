"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AnimalId, ApplicationId, UserId wrap UUIDs; never use bare UUID in domain logic
    - All valid states encoded as Enums; no raw string matching
    - Staff capability is a property of the role, never of the individual user

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to their DB column values
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AnimalId = NewType("AnimalId", UUID)
ApplicationId = NewType("ApplicationId", UUID)
UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class ApplicationStatus(str, Enum):
    """Adoption application lifecycle, mapped to DB `status` column."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


# Statuses that hold an applicant's claim on an animal
OUTSTANDING_STATUSES = frozenset({
    ApplicationStatus.PENDING, ApplicationStatus.APPROVED,
})

TERMINAL_STATUSES = frozenset({
    ApplicationStatus.REJECTED, ApplicationStatus.COMPLETED,
})


class ActorRole(str, Enum):
    """Caller roles as asserted by the upstream auth gateway."""
    USER = "user"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


STAFF_ROLES = frozenset({ActorRole.VOLUNTEER, ActorRole.ADMIN})


class HousingType(str, Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    OTHER = "other"


class Species(str, Enum):
    DOG = "dog"
    CAT = "cat"
    RABBIT = "rabbit"
    BIRD = "bird"
    OTHER = "other"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class AnimalSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"
