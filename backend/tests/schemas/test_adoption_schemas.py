"""Adoption & Animal Schemas — verifies request validation at the API boundary.

Tests cover:
    - ApplicationCreate: questionnaire limits, phone format, whitespace stripping
    - details() excludes the animal reference
    - StatusUpdate accepts only lifecycle states
    - AnimalUpdate: at least one field, nulls dropped for required columns
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.core.domain_types import ApplicationStatus
from app.schemas.adoption import ApplicationCreate, StatusUpdate
from app.schemas.animal import AnimalCreate, AnimalUpdate


def _form(**overrides):
    data = {
        "animal_id": str(uuid4()),
        "housing_type": "condo",
        "has_yard": False,
        "has_other_pets": False,
        "experience_with_pets": "  Two cats over ten years  ",
        "reason_for_adoption": "Empty nest, plenty of time",
        "work_schedule": "Retired",
        "emergency_contact_name": "Jo Park",
        "emergency_contact_phone": "555 123 4567",
    }
    data.update(overrides)
    return data


# ─── ApplicationCreate ──────────────────────────────────────────

def test_valid_form_strips_text():
    form = ApplicationCreate(**_form())
    assert form.experience_with_pets == "Two cats over ten years"
    assert form.housing_type == "condo"


def test_details_exclude_animal_id():
    details = ApplicationCreate(**_form()).details()
    assert "animal_id" not in details
    assert details["work_schedule"] == "Retired"


def test_whitespace_only_answer_rejected():
    with pytest.raises(ValidationError):
        ApplicationCreate(**_form(work_schedule="          "))


def test_short_reason_rejected():
    with pytest.raises(ValidationError):
        ApplicationCreate(**_form(reason_for_adoption="why not"))


def test_bad_phone_rejected():
    with pytest.raises(ValidationError):
        ApplicationCreate(**_form(emergency_contact_phone="call me"))


def test_unknown_housing_type_rejected():
    with pytest.raises(ValidationError):
        ApplicationCreate(**_form(housing_type="boat"))


def test_optional_vet_phone_validated_when_present():
    assert ApplicationCreate(**_form(veterinarian_phone=None)).veterinarian_phone is None
    with pytest.raises(ValidationError):
        ApplicationCreate(**_form(veterinarian_phone="12"))


# ─── StatusUpdate ───────────────────────────────────────────────

def test_status_update_parses_enum():
    update = StatusUpdate(status="completed")
    assert update.status is ApplicationStatus.COMPLETED
    assert update.admin_notes is None


def test_status_update_rejects_unknown_status():
    with pytest.raises(ValidationError):
        StatusUpdate(status="withdrawn")


def test_admin_notes_length_capped():
    with pytest.raises(ValidationError):
        StatusUpdate(status="rejected", admin_notes="x" * 1001)


# ─── Animal schemas ─────────────────────────────────────────────

def test_animal_create_has_no_availability_field():
    animal = AnimalCreate(name="Mochi", species="cat", gender="female", size="small")
    assert "is_available" not in animal.model_dump()


def test_animal_create_rejects_out_of_range_age():
    with pytest.raises(ValidationError):
        AnimalCreate(name="Mochi", species="cat", gender="female", size="small", age_months=12)


def test_animal_update_requires_a_field():
    with pytest.raises(ValidationError):
        AnimalUpdate()


def test_animal_update_changes_drop_null_required_columns():
    update = AnimalUpdate(name=None, breed=None, is_available=False)
    assert update.changes() == {"breed": None, "is_available": False}
