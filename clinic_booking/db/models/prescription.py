# clinic_booking/db/models/prescription.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    PrimaryKeyConstraint,
    String,
    Text,
    func,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.orm import relationship
from sqlalchemy.sql.elements import conv

from clinic_booking.config.constants import MedicationForm
from clinic_booking.db.base import Base, Identifier, enum_column_type, table_args


class PrescriptionModel(Base):
    __tablename__ = "prescriptions"
    __table_args__ = table_args(Index("idx_rx_appt", "appointment_id"))

    prescription_id = Column(Identifier, primary_key=True, autoincrement=True)
    appointment_id = Column(
        Identifier,
        ForeignKey(
            "appointments.appointment_id",
            name="fk_rx_appointment",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    issued_at = Column(DateTime, nullable=False, server_default=func.now())
    notes     = Column(Text, nullable=True)

    appointment = relationship("AppointmentModel", back_populates="prescriptions")
    items = relationship(
        "PrescriptionItemModel",
        back_populates="prescription",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class MedicationModel(Base):
    __tablename__ = "medications"
    __table_args__ = table_args()

    medication_id = Column(Identifier, primary_key=True, autoincrement=True)
    name          = Column(String(150), nullable=False, unique=True)
    form          = Column(
        enum_column_type(MedicationForm, "medication_form"),
        nullable=False,
        default=MedicationForm.OTHER,
        server_default=MedicationForm.OTHER.value,
    )
    strength      = Column(String(50), nullable=True)

    # RESTRICT while any prescription item still names this medication
    items = relationship(
        "PrescriptionItemModel", back_populates="medication", passive_deletes="all"
    )


class PrescriptionItemModel(Base):
    """One medication line of a prescription; one line per medication."""

    __tablename__ = "prescription_items"
    __table_args__ = table_args(
        PrimaryKeyConstraint("prescription_id", "medication_id"),
        CheckConstraint("duration_days > 0", name=conv("chk_duration")),
    )

    prescription_id = Column(
        Identifier,
        ForeignKey(
            "prescriptions.prescription_id",
            name="fk_pitem_rx",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    medication_id = Column(
        Identifier,
        ForeignKey(
            "medications.medication_id",
            name="fk_pitem_med",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    dosage        = Column(String(50), nullable=False)  # e.g. "500 mg"
    frequency     = Column(String(50), nullable=False)  # e.g. "2x/day"
    duration_days = Column(
        Integer().with_variant(mysql.INTEGER(unsigned=True), "mysql"), nullable=False
    )

    prescription = relationship("PrescriptionModel", back_populates="items")
    medication   = relationship("MedicationModel", back_populates="items")
