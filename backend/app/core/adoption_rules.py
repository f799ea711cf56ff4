"""Adoption Lifecycle Rules — the application state machine and its guard checks.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - check_* return an error instance on violation, None on success
    - validate_transition chains all checks; first error wins
    - rejected and completed are terminal: no outgoing transitions, whatever the
      animal's availability; the one exception is the approval-race loser (Conflict)
    - Only pending → approved claims an animal; only approved → rejected|completed releases it

Design Decisions:
    - Errors returned, not raised: the coordinator decides when to raise and attaches
      ids to the error context (ADR: ExMA Functional Core)
    - Transition table as data (ALLOWED_TRANSITIONS), not if-chains: one place to read
      the whole machine
"""

from dataclasses import dataclass

from app.core.domain_types import ApplicationStatus, TERMINAL_STATUSES
from app.core.errors import (
    ShelterError,
    ForbiddenError,
    InvalidTransitionError,
    AnimalUnavailableError,
    AnimalAlreadyAdoptedError,
    AvailabilityLockedError,
    DuplicateApplicationError,
)

CASCADE_REJECTION_NOTE = "Animal was adopted by another applicant"

ALLOWED_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset({
        ApplicationStatus.APPROVED, ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.APPROVED: frozenset({
        ApplicationStatus.REJECTED, ApplicationStatus.COMPLETED,
    }),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.COMPLETED: frozenset(),
}


@dataclass(frozen=True)
class TransitionPlan:
    """Side effects a legal transition must apply in the same unit of work."""
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    claim_animal: bool = False
    release_animal: bool = False
    reject_siblings: bool = False


# ─── Transition checks ───────────────────────────────────────────

def check_staff(staff_authorized: bool) -> ShelterError | None:
    """Status changes require the staff capability decided upstream."""
    if not staff_authorized:
        return ForbiddenError("Only shelter staff can change application status")
    return None


def check_not_noop(
    current: ApplicationStatus, target: ApplicationStatus,
) -> ShelterError | None:
    """Same-status requests are rejected, never silently accepted twice."""
    if current == target:
        return InvalidTransitionError(
            current.value, target.value,
            f"Application is already '{current.value}'",
        )
    return None


def check_lost_approval_race(
    observed: ApplicationStatus | None,
    current: ApplicationStatus,
    target: ApplicationStatus,
    animal_available: bool,
) -> ShelterError | None:
    """Approval requested while pending, overtaken by a sibling's approval cascade.

    `observed` is the status first read for this request. The winner's cascade
    rejected the application between that read and the locked one.
    """
    if (
        target == ApplicationStatus.APPROVED
        and observed == ApplicationStatus.PENDING
        and current == ApplicationStatus.REJECTED
        and not animal_available
    ):
        return AnimalAlreadyAdoptedError()
    return None


def check_allowed(
    current: ApplicationStatus, target: ApplicationStatus,
) -> ShelterError | None:
    """Edge must exist in the transition table; terminal states have none."""
    if current in TERMINAL_STATUSES:
        return InvalidTransitionError(
            current.value, target.value,
            f"Application is '{current.value}' and can no longer change status",
        )
    if target not in ALLOWED_TRANSITIONS[current]:
        return InvalidTransitionError(current.value, target.value)
    return None


def check_animal_free_for_approval(
    target: ApplicationStatus, animal_available: bool, adopted: bool = False,
) -> ShelterError | None:
    """Approval needs the animal still in the pool.

    `adopted` tells an animal held by an approved sibling from a manual hold.
    """
    if target != ApplicationStatus.APPROVED or animal_available:
        return None
    if adopted:
        return AnimalAlreadyAdoptedError()
    return AnimalUnavailableError()


def validate_transition(
    current: ApplicationStatus,
    target: ApplicationStatus,
    animal_available: bool,
    observed: ApplicationStatus | None = None,
    animal_adopted: bool = False,
) -> ShelterError | None:
    """Chain all transition checks. Returns first error or None."""
    return (
        check_not_noop(current, target)
        or check_lost_approval_race(observed, current, target, animal_available)
        or check_allowed(current, target)
        or check_animal_free_for_approval(target, animal_available, animal_adopted)
    )


def plan_transition(
    current: ApplicationStatus, target: ApplicationStatus,
) -> TransitionPlan:
    """Cascading effects for a transition already accepted by validate_transition."""
    approving = (
        current == ApplicationStatus.PENDING
        and target == ApplicationStatus.APPROVED
    )
    releasing = (
        current == ApplicationStatus.APPROVED
        and target in (ApplicationStatus.REJECTED, ApplicationStatus.COMPLETED)
    )
    return TransitionPlan(
        from_status=current,
        to_status=target,
        claim_animal=approving,
        release_animal=releasing,
        reject_siblings=approving,
    )


# ─── Creation & edit checks ──────────────────────────────────────

def check_animal_accepts_applications(animal_available: bool) -> ShelterError | None:
    if not animal_available:
        return AnimalUnavailableError()
    return None


def check_no_outstanding_application(has_outstanding: bool) -> ShelterError | None:
    if has_outstanding:
        return DuplicateApplicationError()
    return None


def validate_new_application(
    animal_available: bool, has_outstanding: bool,
) -> ShelterError | None:
    """Animal must be available and the applicant must not already hold a claim."""
    return (
        check_animal_accepts_applications(animal_available)
        or check_no_outstanding_application(has_outstanding)
    )


def check_availability_edit(
    touches_availability: bool, has_approved: bool,
) -> ShelterError | None:
    """Generic animal edits may not flip availability under an approved adoption."""
    if touches_availability and has_approved:
        return AvailabilityLockedError()
    return None


def check_can_withdraw(
    status: ApplicationStatus, is_owner: bool, staff_authorized: bool,
) -> ShelterError | None:
    """Applicants may withdraw only their own pending applications; staff any."""
    if staff_authorized:
        return None
    if not is_owner:
        return ForbiddenError()
    if status != ApplicationStatus.PENDING:
        return InvalidTransitionError(
            status.value, "withdrawn",
            "Cannot delete non-pending applications",
        )
    return None


def releases_animal_on_removal(status: ApplicationStatus) -> bool:
    """Removing the approved application puts the animal back in the pool."""
    return status == ApplicationStatus.APPROVED
