# tests/test_prescriptions.py
from datetime import datetime

import pytest

from clinic_booking.config.constants import MedicationForm
from clinic_booking.db.crud import prescription as prescription_crud
from clinic_booking.db.errors import (
    CheckViolation,
    ForeignKeyViolation,
    UniqueViolation,
)


@pytest.fixture
async def prescription(db, make_appointment):
    appointment = await make_appointment()
    return await prescription_crud.create_prescription(
        db, appointment.appointment_id, notes="Take after meals"
    )


@pytest.fixture
async def amoxicillin(db):
    return await prescription_crud.create_medication(
        db, "Amoxicillin", MedicationForm.CAPSULE, "500 mg"
    )


async def test_prescription_defaults_issue_time(db, prescription):
    assert prescription.issued_at is not None
    assert prescription.notes == "Take after meals"


async def test_prescription_keeps_explicit_issue_time(db, make_appointment):
    appointment = await make_appointment()
    issued = datetime(2026, 11, 2, 9, 45)

    prescription = await prescription_crud.create_prescription(
        db, appointment.appointment_id, issued_at=issued
    )

    assert prescription.issued_at == issued


async def test_prescription_requires_existing_appointment(db):
    with pytest.raises(ForeignKeyViolation):
        await prescription_crud.create_prescription(db, 31337)


async def test_medication_defaults_to_other_form(db):
    medication = await prescription_crud.create_medication(db, "Zinc")

    assert medication.form is MedicationForm.OTHER
    assert medication.strength is None


async def test_medication_name_is_unique(db, amoxicillin):
    with pytest.raises(UniqueViolation):
        await prescription_crud.create_medication(db, "Amoxicillin")


async def test_zero_day_duration_is_rejected(db, prescription, amoxicillin):
    with pytest.raises(CheckViolation) as excinfo:
        await prescription_crud.add_prescription_item(
            db, prescription.prescription_id, amoxicillin.medication_id, "500 mg", "2x/day", 0
        )

    assert "chk_duration" in excinfo.value.message


async def test_one_day_duration_is_accepted(db, prescription, amoxicillin):
    item = await prescription_crud.add_prescription_item(
        db, prescription.prescription_id, amoxicillin.medication_id, "500 mg", "2x/day", 1
    )

    assert item.duration_days == 1

    loaded = await prescription_crud.get_prescription(db, prescription.prescription_id)
    assert [i.medication.name for i in loaded.items] == ["Amoxicillin"]


async def test_medication_appears_once_per_prescription(db, prescription, amoxicillin):
    await prescription_crud.add_prescription_item(
        db, prescription.prescription_id, amoxicillin.medication_id, "500 mg", "2x/day", 5
    )

    with pytest.raises(UniqueViolation):
        await prescription_crud.add_prescription_item(
            db, prescription.prescription_id, amoxicillin.medication_id, "250 mg", "3x/day", 7
        )


async def test_referenced_medication_cannot_be_deleted(db, prescription, amoxicillin):
    await prescription_crud.add_prescription_item(
        db, prescription.prescription_id, amoxicillin.medication_id, "500 mg", "2x/day", 5
    )

    with pytest.raises(ForeignKeyViolation):
        await prescription_crud.delete_medication(db, amoxicillin.medication_id)

    # once the prescription is gone the medication is free to go
    assert await prescription_crud.delete_prescription(db, prescription.prescription_id) is True
    assert await prescription_crud.delete_medication(db, amoxicillin.medication_id) is True


async def test_prescriptions_for_appointment(db, make_appointment):
    appointment = await make_appointment()
    first = await prescription_crud.create_prescription(
        db, appointment.appointment_id, issued_at=datetime(2026, 11, 2, 9, 0)
    )
    second = await prescription_crud.create_prescription(
        db, appointment.appointment_id, issued_at=datetime(2026, 11, 2, 9, 30)
    )

    prescriptions = await prescription_crud.get_prescriptions_for_appointment(
        db, appointment.appointment_id
    )

    assert [p.prescription_id for p in prescriptions] == [
        first.prescription_id,
        second.prescription_id,
    ]
