# clinic_booking/db/models/room.py
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from clinic_booking.config.constants import RoomType
from clinic_booking.db.base import Base, Identifier, enum_column_type, table_args


class RoomModel(Base):
    __tablename__ = "rooms"
    __table_args__ = table_args()

    room_id = Column(Identifier, primary_key=True, autoincrement=True)
    name    = Column(String(50), nullable=False, unique=True)
    type    = Column(
        enum_column_type(RoomType, "room_type"),
        nullable=False,
        default=RoomType.CONSULTATION,
        server_default=RoomType.CONSULTATION.value,
    )

    # SET NULL is applied by the database
    appointments = relationship(
        "AppointmentModel", back_populates="room", passive_deletes=True
    )
