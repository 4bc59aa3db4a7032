from enum import Enum

DATABASE_NAME = "clinic_db"


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "Other"


class BloodType(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class StaffRole(str, Enum):
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    ADMIN = "Admin"
    LAB_TECH = "LabTech"


class RoomType(str, Enum):
    CONSULTATION = "Consultation"
    SURGERY = "Surgery"
    LAB = "Lab"
    WARD = "Ward"


class AppointmentStatus(str, Enum):
    # Scheduled -> CheckedIn -> Completed / Cancelled / NoShow, by convention only
    SCHEDULED = "Scheduled"
    CHECKED_IN = "CheckedIn"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "NoShow"


class MedicationForm(str, Enum):
    TABLET = "Tablet"
    CAPSULE = "Capsule"
    SYRUP = "Syrup"
    INJECTION = "Injection"
    OINTMENT = "Ointment"
    OTHER = "Other"


class InvoiceStatus(str, Enum):
    # Pending -> Paid / Cancelled / Refunded, by convention only
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class PaymentMethod(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    TRANSFER = "Transfer"
    MOBILE = "Mobile"
