import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.config.constants import RoomType
from clinic_booking.db.crud.common import delete_or_raise, write_or_raise
from clinic_booking.db.models import RoomModel

logger = logging.getLogger(__name__)


async def create_room(
    db: AsyncSession, name: str, room_type: RoomType = RoomType.CONSULTATION
) -> RoomModel:
    """
    Insert a room.

    Raises:
        UniqueViolation: if a room with that name exists
    """
    room = RoomModel(name=name, type=RoomType(room_type))
    async with write_or_raise(db, "create_room"):
        db.add(room)
    await db.refresh(room)
    logger.info(f"CRUD: created room_id={room.room_id} '{name}' ({room.type.value})")
    return room


async def get_room(db: AsyncSession, room_id: int) -> Optional[RoomModel]:
    result = await db.execute(select(RoomModel).where(RoomModel.room_id == room_id))
    return result.scalar_one_or_none()


async def list_rooms(db: AsyncSession, room_type: Optional[RoomType] = None) -> List[RoomModel]:
    query = select(RoomModel)
    if room_type:
        query = query.where(RoomModel.type == RoomType(room_type))
    result = await db.execute(query.order_by(RoomModel.name))
    return result.scalars().all()


async def delete_room(db: AsyncSession, room_id: int) -> bool:
    """Delete a room. Appointments booked in it keep their slot, with no room."""
    stmt = delete(RoomModel).where(RoomModel.room_id == room_id)
    deleted = await delete_or_raise(db, stmt, "delete_room")
    logger.info(f"CRUD: delete room_id={room_id} -> {deleted}")
    return deleted
