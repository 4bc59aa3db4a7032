import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic_booking.config.constants import AppointmentStatus
from clinic_booking.db.crud.common import (
    delete_or_raise,
    execute_or_raise,
    write_or_raise,
)
from clinic_booking.db.models import AppointmentModel

logger = logging.getLogger(__name__)


async def create_appointment(
    db: AsyncSession,
    patient_id: int,
    doctor_id: int,
    scheduled_start: datetime,
    scheduled_end: datetime,
    room_id: Optional[int] = None,
    reason: Optional[str] = None,
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
) -> AppointmentModel:
    """
    Book an appointment.

    No overlap or availability check is made; the only timing rule is the
    schema's own (end strictly after start).

    Args:
        db (AsyncSession): The database session.
        patient_id (int): The patient being seen.
        doctor_id (int): The doctor's staff ID.
        scheduled_start (datetime): Start of the slot.
        scheduled_end (datetime): End of the slot, strictly after the start.
        room_id (Optional[int]): The room, if one is reserved.
        reason (Optional[str]): Reason for the visit.
        status (AppointmentStatus): Initial status, Scheduled by default.

    Returns:
        AppointmentModel: The stored appointment.

    Raises:
        CheckViolation: if the end is not after the start.
        ForeignKeyViolation: if the patient, doctor or room does not exist.
    """
    logger.info(
        f"CRUD: booking appointment for patient_id={patient_id} with doctor_id={doctor_id} "
        f"from {scheduled_start} to {scheduled_end}, room_id={room_id}"
    )
    appointment = AppointmentModel(
        patient_id=patient_id,
        doctor_id=doctor_id,
        room_id=room_id,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        reason=reason,
        status=AppointmentStatus(status),
    )
    async with write_or_raise(db, "create_appointment"):
        db.add(appointment)
    await db.refresh(appointment)
    logger.info(f"CRUD: created appointment_id={appointment.appointment_id}")
    return appointment


async def get_appointment(db: AsyncSession, appointment_id: int) -> Optional[AppointmentModel]:
    """Get an appointment with its room, prescriptions and invoice loaded."""
    query = (
        select(AppointmentModel)
        .options(
            selectinload(AppointmentModel.room),
            selectinload(AppointmentModel.prescriptions),
            selectinload(AppointmentModel.invoice),
        )
        .where(AppointmentModel.appointment_id == appointment_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_appointments_for_patient(
    db: AsyncSession, patient_id: int
) -> List[AppointmentModel]:
    query = (
        select(AppointmentModel)
        .where(AppointmentModel.patient_id == patient_id)
        .order_by(AppointmentModel.scheduled_start)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def list_appointments_for_doctor(
    db: AsyncSession,
    doctor_id: int,
    starts_from: Optional[datetime] = None,
    starts_before: Optional[datetime] = None,
    status: Optional[AppointmentStatus] = None,
) -> List[AppointmentModel]:
    """
    Retrieves a doctor's appointments ordered by start time

    Args:
        db (AsyncSession): the database session
        doctor_id (int): the doctor's staff ID
        starts_from (Optional[datetime]): keep appointments starting at or after this
        starts_before (Optional[datetime]): keep appointments starting before this
        status (Optional[AppointmentStatus]): keep only this status

    Returns:
        List[AppointmentModel]: matching appointments
    """
    logger.debug(
        f"CRUD: fetching appointments for doctor_id={doctor_id} in [{starts_from}, {starts_before})"
    )
    query = select(AppointmentModel).where(AppointmentModel.doctor_id == doctor_id)

    if starts_from is not None:
        query = query.where(AppointmentModel.scheduled_start >= starts_from)
    if starts_before is not None:
        query = query.where(AppointmentModel.scheduled_start < starts_before)
    if status is not None:
        query = query.where(AppointmentModel.status == AppointmentStatus(status))

    result = await db.execute(query.order_by(AppointmentModel.scheduled_start))
    appointments = result.scalars().all()
    logger.info(f"CRUD: found {len(appointments)} appointments for doctor_id={doctor_id}")
    return appointments


async def set_appointment_status(
    db: AsyncSession, appointment_id: int, status: AppointmentStatus
) -> Optional[AppointmentModel]:
    """
    Set the status to any member of the enumerated set.

    Transitions are not checked: moving from Completed back to Scheduled is
    accepted just as the schema accepts it.

    Returns:
        Optional[AppointmentModel]: the updated appointment, or None if not found
    """
    new_status = AppointmentStatus(status)
    appointment = await db.get(AppointmentModel, appointment_id)
    if appointment is None:
        logger.warning(f"CRUD: set_appointment_status - appointment_id={appointment_id} not found")
        return None

    logger.info(
        f"CRUD: appointment_id={appointment_id} status {appointment.status.value} -> {new_status.value}"
    )
    stmt = (
        update(AppointmentModel)
        .where(AppointmentModel.appointment_id == appointment_id)
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    await execute_or_raise(db, stmt, "set_appointment_status")
    await db.refresh(appointment)
    return appointment


async def assign_room(
    db: AsyncSession, appointment_id: int, room_id: Optional[int]
) -> Optional[AppointmentModel]:
    """Reserve a room for the appointment, or release it with ``room_id=None``."""
    appointment = await db.get(AppointmentModel, appointment_id)
    if appointment is None:
        return None

    stmt = (
        update(AppointmentModel)
        .where(AppointmentModel.appointment_id == appointment_id)
        .values(room_id=room_id)
        .execution_options(synchronize_session=False)
    )
    await execute_or_raise(db, stmt, "assign_room")
    await db.refresh(appointment)
    return appointment


async def delete_appointment(db: AsyncSession, appointment_id: int) -> bool:
    """Delete an appointment; its prescriptions, items, invoice and payments go with it."""
    stmt = delete(AppointmentModel).where(AppointmentModel.appointment_id == appointment_id)
    deleted = await delete_or_raise(db, stmt, "delete_appointment")
    logger.info(f"CRUD: delete appointment_id={appointment_id} -> {deleted}")
    return deleted
