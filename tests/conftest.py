# tests/conftest.py
from datetime import date, datetime, timedelta

import pytest
import pytest_asyncio

from clinic_booking.config.constants import Sex, StaffRole
from clinic_booking.db.base import get_engine, get_session_factory
from clinic_booking.db.crud import appointment as appointment_crud
from clinic_booking.db.crud import patient as patient_crud
from clinic_booking.db.crud import room as room_crud
from clinic_booking.db.crud import staff as staff_crud
from clinic_booking.db.schema import create_schema

SLOT_START = datetime(2026, 11, 2, 9, 0)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = await get_engine(f"sqlite+aiosqlite:///{tmp_path / 'clinic_test.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = await get_session_factory(engine)
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_patient(db):
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            first_name="Amara",
            last_name=f"Okafor{n}",
            date_of_birth=date(1988, 3, 14),
            sex=Sex.FEMALE,
            email=f"patient{n}@example.com",
            phone=f"+2348000000{n:02d}",
        )
        fields.update(overrides)
        return await patient_crud.create_patient(db, **fields)

    return _make


@pytest.fixture
def make_doctor(db):
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = dict(
            first_name="Funmi",
            last_name=f"Adebayo{n}",
            role=StaffRole.DOCTOR,
            email=f"doctor{n}@clinic.example.com",
            hire_date=date(2015, 4, 1),
        )
        fields.update(overrides)
        member = await staff_crud.create_staff(db, **fields)
        return await staff_crud.make_doctor(db, member.staff_id)

    return _make


@pytest.fixture
def make_room(db):
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        fields = dict(name=f"C-{100 + counter['n']}")
        fields.update(overrides)
        return await room_crud.create_room(db, **fields)

    return _make


@pytest.fixture
def make_appointment(db, make_patient, make_doctor):
    async def _make(patient=None, doctor=None, start=SLOT_START, minutes=30, **overrides):
        patient = patient or await make_patient()
        doctor = doctor or await make_doctor()
        return await appointment_crud.create_appointment(
            db,
            patient_id=patient.patient_id,
            doctor_id=doctor.doctor_id,
            scheduled_start=start,
            scheduled_end=start + timedelta(minutes=minutes),
            **overrides,
        )

    return _make
