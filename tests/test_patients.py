# tests/test_patients.py
import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from clinic_booking.config.constants import BloodType
from clinic_booking.db.crud import patient as patient_crud
from clinic_booking.db.errors import ForeignKeyViolation, UniqueViolation
from clinic_booking.db.models import PatientProfileModel


async def test_duplicate_email_is_rejected(db, make_patient):
    await make_patient(email="amara@example.com")

    with pytest.raises(UniqueViolation) as excinfo:
        await make_patient(email="amara@example.com")

    assert excinfo.value.table == "patients"
    assert "email" in excinfo.value.constraint


async def test_duplicate_phone_is_rejected(db, make_patient):
    await make_patient(phone="+2348011112222")

    with pytest.raises(UniqueViolation) as excinfo:
        await make_patient(phone="+2348011112222")

    assert "phone" in excinfo.value.constraint


async def test_session_is_usable_after_a_rejected_insert(db, make_patient):
    first = await make_patient(email="amara@example.com")
    with pytest.raises(UniqueViolation):
        await make_patient(email="amara@example.com")

    # objects loaded before the rejected write are still usable
    assert first.email == "amara@example.com"
    second = await make_patient(email="other@example.com")
    assert second.patient_id != first.patient_id
    assert await patient_crud.get_patient_by_email(db, "amara@example.com") is not None


async def test_created_patient_gets_timestamps(db, make_patient):
    patient = await make_patient()

    assert patient.patient_id is not None
    assert patient.created_at is not None
    assert patient.updated_at is not None


async def test_profile_shares_the_patient_key(db, make_patient):
    patient = await make_patient()

    profile = await patient_crud.upsert_profile(
        db, patient.patient_id, blood_type=BloodType.AB_NEG, allergies="Penicillin"
    )

    assert profile.patient_id == patient.patient_id
    assert profile.blood_type is BloodType.AB_NEG

    loaded = await patient_crud.get_patient(db, patient.patient_id)
    assert loaded.profile.allergies == "Penicillin"


async def test_upsert_profile_overwrites_existing_profile(db, make_patient):
    patient = await make_patient()
    await patient_crud.upsert_profile(db, patient.patient_id, blood_type=BloodType.O_POS)

    await patient_crud.upsert_profile(
        db, patient.patient_id, emergency_contact_name="Tunde Okafor"
    )

    result = await db.execute(select(PatientProfileModel))
    profiles = result.scalars().all()
    assert len(profiles) == 1
    assert profiles[0].blood_type is None
    assert profiles[0].emergency_contact_name == "Tunde Okafor"


async def test_profile_requires_existing_patient(db):
    with pytest.raises(ForeignKeyViolation):
        await patient_crud.upsert_profile(db, 9999, blood_type=BloodType.A_POS)


async def test_deleting_patient_cascades_to_profile(db, make_patient):
    patient = await make_patient()
    await patient_crud.upsert_profile(db, patient.patient_id, blood_type=BloodType.B_POS)

    assert await patient_crud.delete_patient(db, patient.patient_id) is True

    assert await patient_crud.get_patient(db, patient.patient_id) is None
    result = await db.execute(select(PatientProfileModel))
    assert result.scalars().all() == []


async def test_deleting_patient_with_appointments_is_restricted(db, make_patient, make_appointment):
    patient = await make_patient()
    await make_appointment(patient=patient)

    with pytest.raises(ForeignKeyViolation):
        await patient_crud.delete_patient(db, patient.patient_id)

    assert patient.email.endswith("@example.com")
    assert await patient_crud.get_patient(db, patient.patient_id) is not None


async def test_deleting_missing_patient_returns_false(db):
    assert await patient_crud.delete_patient(db, 424242) is False


async def test_sex_outside_enumerated_set_is_rejected(db, make_patient):
    with pytest.raises(ValueError):
        await make_patient(sex="X")


async def test_database_rejects_unknown_sex_value(db):
    stmt = text(
        "INSERT INTO patients (first_name, last_name, date_of_birth, sex, email, phone) "
        "VALUES ('A', 'B', '1990-01-01', 'X', 'x@example.com', '+1')"
    )
    with pytest.raises(IntegrityError) as excinfo:
        await db.execute(stmt)
    assert "CHECK constraint failed" in str(excinfo.value)
    await db.rollback()


async def test_list_patients_is_ordered_by_name(db, make_patient):
    await make_patient(first_name="Zed", last_name="Bello")
    await make_patient(first_name="Ada", last_name="Abiola")

    patients = await patient_crud.list_patients(db)

    assert [p.last_name for p in patients] == ["Abiola", "Bello"]
