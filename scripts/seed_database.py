# scripts/seed_database.py
import asyncio
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal

from clinic_booking.config.constants import (
    AppointmentStatus,
    BloodType,
    InvoiceStatus,
    MedicationForm,
    PaymentMethod,
    RoomType,
    Sex,
    StaffRole,
)
from clinic_booking.config.settings import settings
from clinic_booking.db.crud import appointment as appointment_crud
from clinic_booking.db.crud import billing as billing_crud
from clinic_booking.db.crud import patient as patient_crud
from clinic_booking.db.crud import prescription as prescription_crud
from clinic_booking.db.crud import room as room_crud
from clinic_booking.db.crud import specialty as specialty_crud
from clinic_booking.db.crud import staff as staff_crud
from clinic_booking.db.schema import create_schema
from clinic_booking.db.session import db_session, init_database

logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# --- Seed Data ---
PATIENTS = [
    ("Amara", "Okafor", date(1988, 3, 14), Sex.FEMALE, BloodType.O_POS, "Penicillin"),
    ("Tunde", "Bello", date(1975, 11, 2), Sex.MALE, BloodType.A_NEG, None),
    ("Ngozi", "Eze", date(1999, 6, 21), Sex.FEMALE, BloodType.B_POS, "Latex"),
    ("Kofi", "Mensah", date(1962, 1, 30), Sex.MALE, None, None),
    ("Sam", "Adeyemi", date(2004, 9, 9), Sex.OTHER, BloodType.AB_POS, None),
]

STAFF = [
    ("Funmi", "Adebayo", StaffRole.DOCTOR, date(2015, 4, 1)),
    ("Chidi", "Nwosu", StaffRole.DOCTOR, date(2018, 9, 15)),
    ("Halima", "Sani", StaffRole.DOCTOR, date(2021, 1, 11)),
    ("Grace", "Ola", StaffRole.NURSE, date(2019, 7, 1)),
    ("Peter", "Obi", StaffRole.ADMIN, date(2017, 2, 20)),
    ("Rita", "Uche", StaffRole.LAB_TECH, date(2022, 5, 3)),
]

SPECIALTIES = [
    ("General Practice", "Primary care and first consultations"),
    ("Cardiology", "Heart and circulation"),
    ("Dermatology", "Skin, hair and nails"),
    ("Pediatrics", "Children and adolescents"),
]

# doctor index -> specialty indexes
DOCTOR_SPECIALTIES = {0: [0, 1], 1: [0, 3], 2: [2]}

ROOMS = [
    ("C-101", RoomType.CONSULTATION),
    ("C-102", RoomType.CONSULTATION),
    ("S-201", RoomType.SURGERY),
    ("L-001", RoomType.LAB),
    ("W-301", RoomType.WARD),
]

MEDICATIONS = [
    ("Amoxicillin", MedicationForm.CAPSULE, "500 mg"),
    ("Paracetamol", MedicationForm.TABLET, "500 mg"),
    ("Ibuprofen", MedicationForm.TABLET, "400 mg"),
    ("Hydrocortisone", MedicationForm.OINTMENT, "1%"),
    ("Salbutamol", MedicationForm.SYRUP, "2 mg/5 ml"),
]

APPOINTMENT_SLOT = timedelta(minutes=30)
FIRST_SLOT = datetime(2026, 11, 2, 9, 0)


async def seed() -> None:
    async with db_session() as db:
        if await patient_crud.list_patients(db, limit=1):
            logger.info("Database already holds patients, nothing to seed.")
            return

        patients = []
        for first, last, dob, sex, blood_type, allergies in PATIENTS:
            patient = await patient_crud.create_patient(
                db,
                first_name=first,
                last_name=last,
                date_of_birth=dob,
                sex=sex,
                email=f"{first.lower()}.{last.lower()}@example.com",
                phone=f"+234800{len(patients):06d}",
            )
            await patient_crud.upsert_profile(
                db,
                patient.patient_id,
                blood_type=blood_type,
                emergency_contact_name=f"{last} family",
                emergency_contact_phone=f"+234811{len(patients):06d}",
                allergies=allergies,
            )
            patients.append(patient)
        logger.info(f"Seeded {len(patients)} patients with profiles")

        doctors = []
        for first, last, role, hired in STAFF:
            member = await staff_crud.create_staff(
                db,
                first_name=first,
                last_name=last,
                role=role,
                email=f"{first.lower()}.{last.lower()}@clinic.example.com",
                hire_date=hired,
            )
            if role == StaffRole.DOCTOR:
                doctors.append(await staff_crud.make_doctor(db, member.staff_id))
        logger.info(f"Seeded {len(STAFF)} staff members, {len(doctors)} doctors")

        specialties = [
            await specialty_crud.create_specialty(db, name, description)
            for name, description in SPECIALTIES
        ]
        for doctor_index, specialty_indexes in DOCTOR_SPECIALTIES.items():
            for specialty_index in specialty_indexes:
                await specialty_crud.assign_specialty(
                    db,
                    doctors[doctor_index].doctor_id,
                    specialties[specialty_index].specialty_id,
                )

        rooms = [await room_crud.create_room(db, name, room_type) for name, room_type in ROOMS]
        medications = [
            await prescription_crud.create_medication(db, name, form, strength)
            for name, form, strength in MEDICATIONS
        ]

        # one appointment per patient, round-robin over doctors and consultation rooms
        for index, patient in enumerate(patients):
            start = FIRST_SLOT + index * APPOINTMENT_SLOT
            appointment = await appointment_crud.create_appointment(
                db,
                patient_id=patient.patient_id,
                doctor_id=doctors[index % len(doctors)].doctor_id,
                scheduled_start=start,
                scheduled_end=start + APPOINTMENT_SLOT,
                room_id=rooms[index % 2].room_id,
                reason="Routine consultation",
            )
            if index % 2:
                continue

            await appointment_crud.set_appointment_status(
                db, appointment.appointment_id, AppointmentStatus.COMPLETED
            )
            prescription = await prescription_crud.create_prescription(
                db, appointment.appointment_id, notes="Take after meals"
            )
            await prescription_crud.add_prescription_item(
                db,
                prescription.prescription_id,
                medications[index % len(medications)].medication_id,
                dosage=medications[index % len(medications)].strength or "as directed",
                frequency="2x/day",
                duration_days=5 + index,
            )
            invoice = await billing_crud.create_invoice(
                db, appointment.appointment_id, amount=Decimal("15000.00")
            )
            await billing_crud.record_payment(
                db, invoice.invoice_id, Decimal("15000.00"), PaymentMethod.CARD
            )
            await billing_crud.set_invoice_status(db, invoice.invoice_id, InvoiceStatus.PAID)

        logger.info("Seeding complete")


async def main() -> None:
    engine = await init_database()
    try:
        await create_schema(engine)
        await seed()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
