import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic_booking.config.constants import BloodType, Sex
from clinic_booking.db.crud.common import delete_or_raise, write_or_raise
from clinic_booking.db.models import PatientModel, PatientProfileModel

logger = logging.getLogger(__name__)


async def create_patient(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    date_of_birth: date,
    sex: Sex,
    email: str,
    phone: str,
) -> PatientModel:
    """
    Insert a patient.

    Args:
        db (AsyncSession): the database session
        first_name (str): given name
        last_name (str): family name
        date_of_birth (date): date of birth
        sex (Sex): M, F or Other
        email (str): email address, unique across patients
        phone (str): phone number, unique across patients

    Returns:
        PatientModel: the stored patient

    Raises:
        UniqueViolation: if the email or the phone is already registered
    """
    logger.debug(f"CRUD: creating patient '{email}'")
    patient = PatientModel(
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date_of_birth,
        sex=Sex(sex),
        email=email,
        phone=phone,
    )
    async with write_or_raise(db, "create_patient"):
        db.add(patient)
    await db.refresh(patient)
    logger.info(f"CRUD: created patient_id={patient.patient_id}")
    return patient


async def get_patient(db: AsyncSession, patient_id: int) -> Optional[PatientModel]:
    """Get a patient by ID with the profile loaded."""
    query = (
        select(PatientModel)
        .options(selectinload(PatientModel.profile))
        .where(PatientModel.patient_id == patient_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def get_patient_by_email(db: AsyncSession, email: str) -> Optional[PatientModel]:
    query = (
        select(PatientModel)
        .options(selectinload(PatientModel.profile))
        .where(PatientModel.email == email)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_patients(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[PatientModel]:
    query = (
        select(PatientModel)
        .order_by(PatientModel.last_name, PatientModel.first_name, PatientModel.patient_id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def upsert_profile(
    db: AsyncSession,
    patient_id: int,
    blood_type: Optional[BloodType] = None,
    emergency_contact_name: Optional[str] = None,
    emergency_contact_phone: Optional[str] = None,
    allergies: Optional[str] = None,
) -> PatientProfileModel:
    """
    Create the clinical profile of a patient, or overwrite the existing one.

    The profile shares the patient's key, so there is at most one per patient.

    Raises:
        ForeignKeyViolation: if the patient does not exist
    """
    logger.debug(f"CRUD: upserting profile for patient_id={patient_id}")
    profile = await db.get(PatientProfileModel, patient_id)
    async with write_or_raise(db, "upsert_profile"):
        if profile is None:
            profile = PatientProfileModel(patient_id=patient_id)
            db.add(profile)

        profile.blood_type = BloodType(blood_type) if blood_type is not None else None
        profile.emergency_contact_name = emergency_contact_name
        profile.emergency_contact_phone = emergency_contact_phone
        profile.allergies = allergies

    await db.refresh(profile)
    logger.info(f"CRUD: profile stored for patient_id={patient_id}")
    return profile


async def delete_patient(db: AsyncSession, patient_id: int) -> bool:
    """
    Delete a patient; the profile goes with it.

    Raises:
        ForeignKeyViolation: while the patient still has appointments
    """
    stmt = delete(PatientModel).where(PatientModel.patient_id == patient_id)
    deleted = await delete_or_raise(db, stmt, "delete_patient")
    logger.info(f"CRUD: delete patient_id={patient_id} -> {deleted}")
    return deleted
