import logging
from typing import List, Optional

from sqlalchemy import and_, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.db.crud.common import (
    delete_or_raise,
    execute_or_raise,
    write_or_raise,
)
from clinic_booking.db.models import SpecialtyModel, doctor_specialty

logger = logging.getLogger(__name__)


async def create_specialty(
    db: AsyncSession, name: str, description: Optional[str] = None
) -> SpecialtyModel:
    """
    Insert a specialty.

    Raises:
        UniqueViolation: if a specialty with that name exists
    """
    logger.debug(f"CRUD: creating specialty '{name}'")
    specialty = SpecialtyModel(name=name, description=description)
    async with write_or_raise(db, "create_specialty"):
        db.add(specialty)
    await db.refresh(specialty)
    logger.info(f"CRUD: created specialty_id={specialty.specialty_id} '{name}'")
    return specialty


async def assign_specialty(db: AsyncSession, doctor_id: int, specialty_id: int) -> None:
    """
    Link a doctor to a specialty.

    Raises:
        UniqueViolation: if the pair is already linked
        ForeignKeyViolation: if the doctor or the specialty does not exist
    """
    stmt = insert(doctor_specialty).values(doctor_id=doctor_id, specialty_id=specialty_id)
    await execute_or_raise(db, stmt, "assign_specialty")
    logger.info(f"CRUD: doctor_id={doctor_id} linked to specialty_id={specialty_id}")


async def unassign_specialty(db: AsyncSession, doctor_id: int, specialty_id: int) -> bool:
    stmt = delete(doctor_specialty).where(
        and_(
            doctor_specialty.c.doctor_id == doctor_id,
            doctor_specialty.c.specialty_id == specialty_id,
        )
    )
    return await delete_or_raise(db, stmt, "unassign_specialty")


async def get_specialties_for_doctor(db: AsyncSession, doctor_id: int) -> List[SpecialtyModel]:
    """
    Retrieves the specialties linked to a doctor

    Args:
        db (AsyncSession): the database session
        doctor_id (int): the doctor's staff ID

    Returns:
        List[SpecialtyModel]: specialties ordered by name
    """
    logger.debug(f"CRUD: fetching specialties for doctor_id '{doctor_id}'")

    stmt = (
        select(SpecialtyModel)
        .join(doctor_specialty, doctor_specialty.c.specialty_id == SpecialtyModel.specialty_id)
        .where(doctor_specialty.c.doctor_id == doctor_id)
        .order_by(SpecialtyModel.name)
    )
    result = await db.execute(stmt)
    specialties = result.scalars().all()

    logger.info(f"CRUD: found {len(specialties)} specialties for doctor_id '{doctor_id}'")
    return specialties


async def delete_specialty(db: AsyncSession, specialty_id: int) -> bool:
    """
    Delete a specialty.

    Raises:
        ForeignKeyViolation: while any doctor is still linked to it
    """
    stmt = delete(SpecialtyModel).where(SpecialtyModel.specialty_id == specialty_id)
    return await delete_or_raise(db, stmt, "delete_specialty")
