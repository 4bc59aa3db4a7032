# clinic_booking/db/models/patient.py
from sqlalchemy import TIMESTAMP, Column, Date, ForeignKey, String, Text, func
from sqlalchemy.orm import relationship

from clinic_booking.config.constants import BloodType, Sex
from clinic_booking.db.base import Base, Identifier, enum_column_type, table_args


class PatientModel(Base):
    __tablename__ = "patients"
    __table_args__ = table_args()

    patient_id    = Column(Identifier, primary_key=True, autoincrement=True)
    first_name    = Column(String(100), nullable=False)
    last_name     = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    sex           = Column(enum_column_type(Sex, "patient_sex"), nullable=False)
    email         = Column(String(255), nullable=False, unique=True)
    phone         = Column(String(30), nullable=False, unique=True)
    created_at    = Column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at    = Column(
        TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    # one-to-one, shares the patient's key
    profile = relationship(
        "PatientProfileModel",
        back_populates="patient",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # RESTRICT: the database refuses the delete, the ORM must not null the FK
    appointments = relationship(
        "AppointmentModel", back_populates="patient", passive_deletes="all"
    )

    def __repr__(self):
        return f"<PatientModel(patient_id={self.patient_id}, email={self.email!r})>"


class PatientProfileModel(Base):
    __tablename__ = "patient_profile"
    __table_args__ = table_args()

    patient_id = Column(
        Identifier,
        ForeignKey(
            "patients.patient_id",
            name="fk_profile_patient",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        primary_key=True,
        autoincrement=False,
    )
    blood_type              = Column(enum_column_type(BloodType, "blood_type"), nullable=True)
    emergency_contact_name  = Column(String(150))
    emergency_contact_phone = Column(String(30))
    allergies               = Column(Text)

    patient = relationship("PatientModel", back_populates="profile")
