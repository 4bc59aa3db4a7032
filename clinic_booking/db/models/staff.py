# clinic_booking/db/models/staff.py
from sqlalchemy import (
    Boolean,
    Column,
    Date,
    ForeignKey,
    PrimaryKeyConstraint,
    String,
    Table,
    TIMESTAMP,
    func,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from clinic_booking.config.constants import StaffRole
from clinic_booking.db.base import (
    Base,
    Identifier,
    MYSQL_TABLE_OPTIONS,
    enum_column_type,
    table_args,
)


# M:N doctors <-> specialties; the composite key rejects duplicate pairs
doctor_specialty = Table(
    "doctor_specialty",
    Base.metadata,
    Column(
        "doctor_id",
        Identifier,
        ForeignKey(
            "doctors.doctor_id",
            name="fk_ds_doctor",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
    ),
    Column(
        "specialty_id",
        Identifier,
        ForeignKey(
            "specialties.specialty_id",
            name="fk_ds_specialty",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        nullable=False,
    ),
    PrimaryKeyConstraint("doctor_id", "specialty_id"),
    **MYSQL_TABLE_OPTIONS,
)


class StaffModel(Base):
    __tablename__ = "staff"
    __table_args__ = table_args()

    staff_id   = Column(Identifier, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name  = Column(String(100), nullable=False)
    role       = Column(enum_column_type(StaffRole, "staff_role"), nullable=False)
    email      = Column(String(255), nullable=False, unique=True)
    phone      = Column(String(30), nullable=True)
    hire_date  = Column(Date, nullable=False)
    active     = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column(
        TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    doctor_profile = relationship(
        "DoctorModel",
        back_populates="staff",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<StaffModel(staff_id={self.staff_id}, role={self.role})>"


class DoctorModel(Base):
    """A staff member that appointments can be booked with."""

    __tablename__ = "doctors"
    __table_args__ = table_args()

    doctor_id = Column(
        Identifier,
        ForeignKey(
            "staff.staff_id",
            name="fk_doctor_staff",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        primary_key=True,
        autoincrement=False,
    )

    staff = relationship("StaffModel", back_populates="doctor_profile")
    specialties = relationship(
        "SpecialtyModel",
        secondary=doctor_specialty,
        back_populates="doctors",
        passive_deletes=True,
    )
    appointments = relationship(
        "AppointmentModel", back_populates="doctor", passive_deletes="all"
    )


class SpecialtyModel(Base):
    __tablename__ = "specialties"
    __table_args__ = table_args()

    specialty_id = Column(Identifier, primary_key=True, autoincrement=True)
    name         = Column(String(120), nullable=False, unique=True)
    description  = Column(String(255), nullable=True)

    doctors = relationship(
        "DoctorModel",
        secondary=doctor_specialty,
        back_populates="specialties",
        passive_deletes=True,
    )
