# Models package (re-export every table so Base.metadata is complete on import)
from .patient import PatientModel, PatientProfileModel
from .staff import DoctorModel, SpecialtyModel, StaffModel, doctor_specialty
from .room import RoomModel
from .appointment import AppointmentModel
from .prescription import MedicationModel, PrescriptionItemModel, PrescriptionModel
from .billing import InvoiceModel, PaymentModel

__all__ = [
    "PatientModel",
    "PatientProfileModel",
    "StaffModel",
    "DoctorModel",
    "SpecialtyModel",
    "doctor_specialty",
    "RoomModel",
    "AppointmentModel",
    "PrescriptionModel",
    "MedicationModel",
    "PrescriptionItemModel",
    "InvoiceModel",
    "PaymentModel",
]
