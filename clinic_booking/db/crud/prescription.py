import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic_booking.config.constants import MedicationForm
from clinic_booking.db.crud.common import (
    delete_or_raise,
    execute_or_raise,
    write_or_raise,
)
from clinic_booking.db.models import (
    MedicationModel,
    PrescriptionItemModel,
    PrescriptionModel,
)

logger = logging.getLogger(__name__)


async def create_medication(
    db: AsyncSession,
    name: str,
    form: MedicationForm = MedicationForm.OTHER,
    strength: Optional[str] = None,
) -> MedicationModel:
    """
    Insert a medication into the master list.

    Raises:
        UniqueViolation: if a medication with that name exists
    """
    medication = MedicationModel(name=name, form=MedicationForm(form), strength=strength)
    async with write_or_raise(db, "create_medication"):
        db.add(medication)
    await db.refresh(medication)
    logger.info(f"CRUD: created medication_id={medication.medication_id} '{name}'")
    return medication


async def list_medications(db: AsyncSession) -> List[MedicationModel]:
    result = await db.execute(select(MedicationModel).order_by(MedicationModel.name))
    return result.scalars().all()


async def delete_medication(db: AsyncSession, medication_id: int) -> bool:
    """
    Delete a medication.

    Raises:
        ForeignKeyViolation: while a prescription item still references it
    """
    stmt = delete(MedicationModel).where(MedicationModel.medication_id == medication_id)
    return await delete_or_raise(db, stmt, "delete_medication")


async def create_prescription(
    db: AsyncSession,
    appointment_id: int,
    notes: Optional[str] = None,
    issued_at: Optional[datetime] = None,
) -> PrescriptionModel:
    """
    Issue a prescription for an appointment. ``issued_at`` defaults to the
    database's current time.

    Raises:
        ForeignKeyViolation: if the appointment does not exist
    """
    logger.debug(f"CRUD: issuing prescription for appointment_id={appointment_id}")
    prescription = PrescriptionModel(appointment_id=appointment_id, notes=notes)
    if issued_at is not None:
        prescription.issued_at = issued_at
    async with write_or_raise(db, "create_prescription"):
        db.add(prescription)
    await db.refresh(prescription)
    logger.info(f"CRUD: created prescription_id={prescription.prescription_id}")
    return prescription


async def add_prescription_item(
    db: AsyncSession,
    prescription_id: int,
    medication_id: int,
    dosage: str,
    frequency: str,
    duration_days: int,
) -> PrescriptionItemModel:
    """
    Add a medication line to a prescription.

    Args:
        db (AsyncSession): the database session
        prescription_id (int): the prescription
        medication_id (int): the medication, at most once per prescription
        dosage (str): e.g. "500 mg"
        frequency (str): e.g. "2x/day"
        duration_days (int): days of treatment, at least 1

    Returns:
        PrescriptionItemModel: the stored line

    Raises:
        CheckViolation: if duration_days is not positive
        UniqueViolation: if the medication is already on the prescription
        ForeignKeyViolation: if the prescription or medication does not exist
    """
    stmt = insert(PrescriptionItemModel).values(
        prescription_id=prescription_id,
        medication_id=medication_id,
        dosage=dosage,
        frequency=frequency,
        duration_days=duration_days,
    )
    await execute_or_raise(db, stmt, "add_prescription_item")
    logger.info(
        f"CRUD: medication_id={medication_id} added to prescription_id={prescription_id} "
        f"for {duration_days} days"
    )

    result = await db.execute(
        select(PrescriptionItemModel).where(
            PrescriptionItemModel.prescription_id == prescription_id,
            PrescriptionItemModel.medication_id == medication_id,
        )
    )
    return result.scalar_one()


async def get_prescription(db: AsyncSession, prescription_id: int) -> Optional[PrescriptionModel]:
    """Get a prescription with its items and their medications loaded."""
    query = (
        select(PrescriptionModel)
        .options(
            selectinload(PrescriptionModel.items).selectinload(PrescriptionItemModel.medication)
        )
        .where(PrescriptionModel.prescription_id == prescription_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_prescriptions_for_appointment(
    db: AsyncSession, appointment_id: int
) -> List[PrescriptionModel]:
    query = (
        select(PrescriptionModel)
        .where(PrescriptionModel.appointment_id == appointment_id)
        .order_by(PrescriptionModel.issued_at, PrescriptionModel.prescription_id)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def delete_prescription(db: AsyncSession, prescription_id: int) -> bool:
    stmt = delete(PrescriptionModel).where(PrescriptionModel.prescription_id == prescription_id)
    return await delete_or_raise(db, stmt, "delete_prescription")
