# clinic_booking/db/models/appointment.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    TIMESTAMP,
    func,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql.elements import conv

from clinic_booking.config.constants import AppointmentStatus
from clinic_booking.db.base import Base, Identifier, enum_column_type, table_args


class AppointmentModel(Base):
    __tablename__ = "appointments"
    __table_args__ = table_args(
        CheckConstraint("scheduled_end > scheduled_start", name=conv("chk_appt_time")),
        Index("idx_appt_patient", "patient_id"),
        Index("idx_appt_doctor", "doctor_id"),
        Index("idx_appt_room", "room_id"),
        Index("idx_appt_start", "scheduled_start"),
    )

    appointment_id = Column(Identifier, primary_key=True, autoincrement=True)
    patient_id = Column(
        Identifier,
        ForeignKey(
            "patients.patient_id",
            name="fk_appt_patient",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    doctor_id = Column(
        Identifier,
        ForeignKey(
            "doctors.doctor_id",
            name="fk_appt_doctor",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    room_id = Column(
        Identifier,
        ForeignKey(
            "rooms.room_id",
            name="fk_appt_room",
            ondelete="SET NULL",
            onupdate="CASCADE",
        ),
        nullable=True,
    )
    scheduled_start = Column(DateTime, nullable=False)
    scheduled_end   = Column(DateTime, nullable=False)
    status = Column(
        enum_column_type(AppointmentStatus, "appointment_status"),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
        server_default=AppointmentStatus.SCHEDULED.value,
    )
    reason     = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column(
        TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    patient = relationship("PatientModel", back_populates="appointments")
    doctor  = relationship("DoctorModel", back_populates="appointments")
    room    = relationship("RoomModel", back_populates="appointments")

    prescriptions = relationship(
        "PrescriptionModel",
        back_populates="appointment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    invoice = relationship(
        "InvoiceModel",
        back_populates="appointment",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return (
            f"<AppointmentModel(appointment_id={self.appointment_id}, "
            f"patient_id={self.patient_id}, doctor_id={self.doctor_id}, status={self.status})>"
        )
