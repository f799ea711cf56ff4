"""Domain Types — verifies identity types and enum values.

Tests:
    - NewType wrappers exist and are callable
    - ApplicationStatus has exactly the four lifecycle states
    - Outstanding and terminal sets partition the lifecycle
    - Staff roles are volunteer and admin
"""

from uuid import uuid4

from app.core.domain_types import (
    AnimalId, ApplicationId, UserId,
    ApplicationStatus, ActorRole,
    OUTSTANDING_STATUSES, TERMINAL_STATUSES, STAFF_ROLES,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert AnimalId(uid) == uid
    assert ApplicationId(uid) == uid
    assert UserId(uid) == uid


def test_application_status_has_four_states():
    assert {s.value for s in ApplicationStatus} == {
        "pending", "approved", "rejected", "completed",
    }


def test_outstanding_and_terminal_partition_statuses():
    assert OUTSTANDING_STATUSES | TERMINAL_STATUSES == set(ApplicationStatus)
    assert not OUTSTANDING_STATUSES & TERMINAL_STATUSES


def test_staff_roles():
    assert STAFF_ROLES == {ActorRole.VOLUNTEER, ActorRole.ADMIN}
    assert ActorRole.USER not in STAFF_ROLES


def test_enums_compare_equal_to_column_values():
    assert ApplicationStatus.APPROVED == "approved"
    assert ActorRole("admin") is ActorRole.ADMIN
