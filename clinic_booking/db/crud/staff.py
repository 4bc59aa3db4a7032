import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic_booking.config.constants import StaffRole
from clinic_booking.db.crud.common import (
    delete_or_raise,
    execute_or_raise,
    write_or_raise,
)
from clinic_booking.db.models import DoctorModel, StaffModel

logger = logging.getLogger(__name__)


async def create_staff(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    role: StaffRole,
    email: str,
    hire_date: date,
    phone: Optional[str] = None,
    active: bool = True,
) -> StaffModel:
    """
    Insert a staff member.

    Args:
        db (AsyncSession): the database session
        first_name (str): given name
        last_name (str): family name
        role (StaffRole): Doctor, Nurse, Admin or LabTech
        email (str): work email, unique across staff
        hire_date (date): first day of employment
        phone (Optional[str]): contact number
        active (bool): whether the member currently works at the clinic

    Returns:
        StaffModel: the stored staff member

    Raises:
        UniqueViolation: if the email is already used by another staff member
    """
    logger.debug(f"CRUD: creating staff '{email}' as {role}")
    member = StaffModel(
        first_name=first_name,
        last_name=last_name,
        role=StaffRole(role),
        email=email,
        hire_date=hire_date,
        phone=phone,
        active=active,
    )
    async with write_or_raise(db, "create_staff"):
        db.add(member)
    await db.refresh(member)
    logger.info(f"CRUD: created staff_id={member.staff_id}")
    return member


async def get_staff(db: AsyncSession, staff_id: int) -> Optional[StaffModel]:
    query = (
        select(StaffModel)
        .options(selectinload(StaffModel.doctor_profile))
        .where(StaffModel.staff_id == staff_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_staff(
    db: AsyncSession,
    role: Optional[StaffRole] = None,
    active_only: bool = False,
    skip: int = 0,
    limit: int = 100,
) -> List[StaffModel]:
    """
    Get staff members, optionally filtered by role and active flag.

    Args:
        db: Database session
        role: Filter by role (optional)
        active_only: Skip members whose active flag is off
        skip: Number of records to skip
        limit: Maximum number of records to return

    Returns:
        List of StaffModel objects ordered by ID
    """
    query = select(StaffModel)

    if role:
        query = query.where(StaffModel.role == StaffRole(role))
    if active_only:
        query = query.where(StaffModel.active.is_(True))

    query = query.order_by(StaffModel.staff_id).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()


async def deactivate_staff(db: AsyncSession, staff_id: int) -> bool:
    """Clear the active flag. Returns False if no such staff member."""
    stmt = (
        update(StaffModel)
        .where(StaffModel.staff_id == staff_id)
        .values(active=False)
        .execution_options(synchronize_session=False)
    )
    result = await execute_or_raise(db, stmt, "deactivate_staff")
    logger.info(f"CRUD: deactivated staff_id={staff_id} -> {result.rowcount > 0}")
    return result.rowcount > 0


async def make_doctor(db: AsyncSession, staff_id: int) -> DoctorModel:
    """
    Register an existing staff member as a doctor (same identity).

    Raises:
        ForeignKeyViolation: if the staff member does not exist
        UniqueViolation: if the staff member is already a doctor
    """
    logger.debug(f"CRUD: registering staff_id={staff_id} as doctor")
    await execute_or_raise(db, insert(DoctorModel).values(doctor_id=staff_id), "make_doctor")
    doctor = await db.get(DoctorModel, staff_id)
    logger.info(f"CRUD: doctor_id={staff_id} registered")
    return doctor


async def get_doctor(db: AsyncSession, doctor_id: int) -> Optional[DoctorModel]:
    """Get a doctor with the staff record and specialties loaded."""
    query = (
        select(DoctorModel)
        .options(selectinload(DoctorModel.staff), selectinload(DoctorModel.specialties))
        .where(DoctorModel.doctor_id == doctor_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def delete_staff(db: AsyncSession, staff_id: int) -> bool:
    """
    Delete a staff member. A doctor row and its specialty links go with it.

    Raises:
        ForeignKeyViolation: while the member, as a doctor, still has appointments
    """
    stmt = delete(StaffModel).where(StaffModel.staff_id == staff_id)
    deleted = await delete_or_raise(db, stmt, "delete_staff")
    logger.info(f"CRUD: delete staff_id={staff_id} -> {deleted}")
    return deleted
