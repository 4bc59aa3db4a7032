# tests/test_appointments.py
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from clinic_booking.config.constants import AppointmentStatus, PaymentMethod, RoomType
from clinic_booking.db.crud import appointment as appointment_crud
from clinic_booking.db.crud import billing as billing_crud
from clinic_booking.db.crud import prescription as prescription_crud
from clinic_booking.db.crud import room as room_crud
from clinic_booking.db.errors import (
    CheckViolation,
    ForeignKeyViolation,
    UniqueViolation,
)
from clinic_booking.db.models import PaymentModel, PrescriptionItemModel

from tests.conftest import SLOT_START


async def test_new_appointment_is_scheduled(db, make_appointment):
    appointment = await make_appointment(reason="Follow-up")

    assert appointment.status is AppointmentStatus.SCHEDULED
    assert appointment.room_id is None
    assert appointment.reason == "Follow-up"


@pytest.mark.parametrize("minutes", [0, -15])
async def test_end_must_be_after_start(db, make_appointment, minutes):
    with pytest.raises(CheckViolation) as excinfo:
        await make_appointment(minutes=minutes)

    assert "chk_appt_time" in excinfo.value.message


async def test_one_minute_appointment_is_accepted(db, make_appointment):
    appointment = await make_appointment(minutes=1)

    assert appointment.scheduled_end - appointment.scheduled_start == timedelta(minutes=1)


async def test_appointment_requires_existing_patient(db, make_doctor):
    doctor = await make_doctor()

    with pytest.raises(ForeignKeyViolation):
        await appointment_crud.create_appointment(
            db,
            patient_id=777,
            doctor_id=doctor.doctor_id,
            scheduled_start=SLOT_START,
            scheduled_end=SLOT_START + timedelta(minutes=30),
        )


async def test_overlapping_appointments_are_not_rejected(db, make_appointment, make_doctor):
    doctor = await make_doctor()
    await make_appointment(doctor=doctor)

    second = await make_appointment(doctor=doctor, start=SLOT_START + timedelta(minutes=10))

    assert second.appointment_id is not None


async def test_deleting_room_nulls_the_reference(db, make_appointment, make_room):
    room = await make_room(room_type=RoomType.SURGERY)
    appointment = await make_appointment(room_id=room.room_id)
    assert appointment.room_id == room.room_id

    assert await room_crud.delete_room(db, room.room_id) is True

    reloaded = await appointment_crud.get_appointment(db, appointment.appointment_id)
    assert reloaded is not None
    assert reloaded.room_id is None
    assert reloaded.room is None


async def test_assign_and_release_room(db, make_appointment, make_room):
    appointment = await make_appointment()
    room = await make_room()

    updated = await appointment_crud.assign_room(db, appointment.appointment_id, room.room_id)
    assert updated.room_id == room.room_id

    released = await appointment_crud.assign_room(db, appointment.appointment_id, None)
    assert released.room_id is None

    assert await appointment_crud.assign_room(db, 5555, room.room_id) is None


async def test_assigning_missing_room_is_rejected(db, make_appointment):
    appointment = await make_appointment()

    with pytest.raises(ForeignKeyViolation):
        await appointment_crud.assign_room(db, appointment.appointment_id, 9999)

    assert appointment.room_id is None
    reloaded = await appointment_crud.get_appointment(db, appointment.appointment_id)
    assert reloaded.room_id is None


async def test_room_name_is_unique(db, make_room):
    await make_room(name="C-101")

    with pytest.raises(UniqueViolation):
        await make_room(name="C-101", room_type=RoomType.WARD)


async def test_status_changes_are_not_constrained(db, make_appointment):
    appointment = await make_appointment()

    completed = await appointment_crud.set_appointment_status(
        db, appointment.appointment_id, AppointmentStatus.COMPLETED
    )
    assert completed.status is AppointmentStatus.COMPLETED

    # back to the start of the lifecycle
    rescheduled = await appointment_crud.set_appointment_status(
        db, appointment.appointment_id, "Scheduled"
    )
    assert rescheduled.status is AppointmentStatus.SCHEDULED

    assert await appointment_crud.set_appointment_status(
        db, 4040, AppointmentStatus.NO_SHOW
    ) is None


async def test_status_outside_enumerated_set_is_rejected(db, make_appointment):
    appointment = await make_appointment()

    with pytest.raises(ValueError):
        await appointment_crud.set_appointment_status(db, appointment.appointment_id, "Lost")

    with pytest.raises(IntegrityError):
        await db.execute(
            text("UPDATE appointments SET status = 'Lost' WHERE appointment_id = :id"),
            {"id": appointment.appointment_id},
        )
    await db.rollback()


async def test_deleting_appointment_cascades_to_items_and_payments(
    db, make_appointment
):
    appointment = await make_appointment()
    prescription = await prescription_crud.create_prescription(db, appointment.appointment_id)
    medication = await prescription_crud.create_medication(db, "Paracetamol")
    await prescription_crud.add_prescription_item(
        db, prescription.prescription_id, medication.medication_id, "500 mg", "3x/day", 3
    )
    invoice = await billing_crud.create_invoice(db, appointment.appointment_id, amount="50.00")
    await billing_crud.record_payment(db, invoice.invoice_id, "50.00", PaymentMethod.CASH)
    assert len(await billing_crud.get_payments_for_invoice(db, invoice.invoice_id)) == 1

    assert await appointment_crud.delete_appointment(db, appointment.appointment_id) is True

    assert await appointment_crud.get_appointment(db, appointment.appointment_id) is None
    assert await prescription_crud.get_prescription(db, prescription.prescription_id) is None
    assert await billing_crud.get_invoice_for_appointment(db, appointment.appointment_id) is None
    assert (await db.execute(select(PrescriptionItemModel))).scalars().all() == []
    assert (await db.execute(select(PaymentModel))).scalars().all() == []
    # the medication itself is master data and stays
    assert [m.name for m in await prescription_crud.list_medications(db)] == ["Paracetamol"]


async def test_appointments_for_doctor_window(db, make_appointment, make_doctor):
    doctor = await make_doctor()
    day = datetime(2026, 11, 2)
    for hour in (8, 10, 14):
        await make_appointment(doctor=doctor, start=day.replace(hour=hour))
    await make_appointment(start=day.replace(hour=10))  # another doctor

    morning = await appointment_crud.list_appointments_for_doctor(
        db, doctor.doctor_id, starts_from=day.replace(hour=9), starts_before=day.replace(hour=12)
    )
    assert [a.scheduled_start.hour for a in morning] == [10]

    everything = await appointment_crud.list_appointments_for_doctor(db, doctor.doctor_id)
    assert [a.scheduled_start.hour for a in everything] == [8, 10, 14]

    cancelled = await appointment_crud.list_appointments_for_doctor(
        db, doctor.doctor_id, status=AppointmentStatus.CANCELLED
    )
    assert cancelled == []


async def test_appointments_for_patient(db, make_appointment, make_patient):
    patient = await make_patient()
    later = await make_appointment(patient=patient, start=SLOT_START + timedelta(days=7))
    earlier = await make_appointment(patient=patient)

    appointments = await appointment_crud.list_appointments_for_patient(db, patient.patient_id)

    assert [a.appointment_id for a in appointments] == [
        earlier.appointment_id,
        later.appointment_id,
    ]


async def test_rooms_can_be_filtered_by_type(db, make_room):
    consult = await make_room()
    lab = await make_room(room_type=RoomType.LAB)

    assert [r.room_id for r in await room_crud.list_rooms(db, RoomType.LAB)] == [lab.room_id]
    assert {r.room_id for r in await room_crud.list_rooms(db)} == {consult.room_id, lab.room_id}
    assert (await room_crud.get_room(db, consult.room_id)).type == RoomType.CONSULTATION
    assert await room_crud.get_room(db, 9999) is None
