"""create_clinic_schema

Revision ID: 3f9c2a71d5e4
Revises:
Create Date: 2026-10-19 10:12:41.530912

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision = "3f9c2a71d5e4"
down_revision = None
branch_labels = None
depends_on = None


ID = (
    sa.BigInteger()
    .with_variant(mysql.BIGINT(unsigned=True), "mysql")
    .with_variant(sa.Integer(), "sqlite")
)
UNSIGNED_INT = sa.Integer().with_variant(mysql.INTEGER(unsigned=True), "mysql")

MYSQL_OPTIONS = {"mysql_engine": "InnoDB", "mysql_default_charset": "utf8mb4"}

ENUMS = {
    "patient_sex": ("M", "F", "Other"),
    "blood_type": ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"),
    "staff_role": ("Doctor", "Nurse", "Admin", "LabTech"),
    "room_type": ("Consultation", "Surgery", "Lab", "Ward"),
    "appointment_status": ("Scheduled", "CheckedIn", "Completed", "Cancelled", "NoShow"),
    "medication_form": ("Tablet", "Capsule", "Syrup", "Injection", "Ointment", "Other"),
    "invoice_status": ("Pending", "Paid", "Cancelled", "Refunded"),
    "payment_method": ("Cash", "Card", "Transfer", "Mobile"),
}


def _enum(name):
    return sa.Enum(*ENUMS[name], name=name, create_constraint=True)


def _timestamps():
    return [
        sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "patients",
        sa.Column("patient_id", ID, autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("sex", _enum("patient_sex"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("patient_id", name=op.f("pk_patients")),
        sa.UniqueConstraint("email", name=op.f("uq_patients_email")),
        sa.UniqueConstraint("phone", name=op.f("uq_patients_phone")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "patient_profile",
        sa.Column("patient_id", ID, autoincrement=False, nullable=False),
        sa.Column("blood_type", _enum("blood_type"), nullable=True),
        sa.Column("emergency_contact_name", sa.String(length=150), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(length=30), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.patient_id"],
            name="fk_profile_patient",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("patient_id", name=op.f("pk_patient_profile")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "staff",
        sa.Column("staff_id", ID, autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", _enum("staff_role"), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("staff_id", name=op.f("pk_staff")),
        sa.UniqueConstraint("email", name=op.f("uq_staff_email")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "doctors",
        sa.Column("doctor_id", ID, autoincrement=False, nullable=False),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["staff.staff_id"],
            name="fk_doctor_staff",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("doctor_id", name=op.f("pk_doctors")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "specialties",
        sa.Column("specialty_id", ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint("specialty_id", name=op.f("pk_specialties")),
        sa.UniqueConstraint("name", name=op.f("uq_specialties_name")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "doctor_specialty",
        sa.Column("doctor_id", ID, nullable=False),
        sa.Column("specialty_id", ID, nullable=False),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_ds_doctor",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["specialty_id"],
            ["specialties.specialty_id"],
            name="fk_ds_specialty",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("doctor_id", "specialty_id", name=op.f("pk_doctor_specialty")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "rooms",
        sa.Column("room_id", ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("type", _enum("room_type"), server_default="Consultation", nullable=False),
        sa.PrimaryKeyConstraint("room_id", name=op.f("pk_rooms")),
        sa.UniqueConstraint("name", name=op.f("uq_rooms_name")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "appointments",
        sa.Column("appointment_id", ID, autoincrement=True, nullable=False),
        sa.Column("patient_id", ID, nullable=False),
        sa.Column("doctor_id", ID, nullable=False),
        sa.Column("room_id", ID, nullable=True),
        sa.Column("scheduled_start", sa.DateTime(), nullable=False),
        sa.Column("scheduled_end", sa.DateTime(), nullable=False),
        sa.Column(
            "status", _enum("appointment_status"), server_default="Scheduled", nullable=False
        ),
        sa.Column("reason", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("scheduled_end > scheduled_start", name=op.f("chk_appt_time")),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.patient_id"],
            name="fk_appt_patient",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_appt_doctor",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["room_id"],
            ["rooms.room_id"],
            name="fk_appt_room",
            ondelete="SET NULL",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("appointment_id", name=op.f("pk_appointments")),
        **MYSQL_OPTIONS,
    )
    op.create_index("idx_appt_patient", "appointments", ["patient_id"], unique=False)
    op.create_index("idx_appt_doctor", "appointments", ["doctor_id"], unique=False)
    op.create_index("idx_appt_room", "appointments", ["room_id"], unique=False)
    op.create_index("idx_appt_start", "appointments", ["scheduled_start"], unique=False)

    op.create_table(
        "prescriptions",
        sa.Column("prescription_id", ID, autoincrement=True, nullable=False),
        sa.Column("appointment_id", ID, nullable=False),
        sa.Column("issued_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.appointment_id"],
            name="fk_rx_appointment",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("prescription_id", name=op.f("pk_prescriptions")),
        **MYSQL_OPTIONS,
    )
    op.create_index("idx_rx_appt", "prescriptions", ["appointment_id"], unique=False)

    op.create_table(
        "medications",
        sa.Column("medication_id", ID, autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("form", _enum("medication_form"), server_default="Other", nullable=False),
        sa.Column("strength", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("medication_id", name=op.f("pk_medications")),
        sa.UniqueConstraint("name", name=op.f("uq_medications_name")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "prescription_items",
        sa.Column("prescription_id", ID, nullable=False),
        sa.Column("medication_id", ID, nullable=False),
        sa.Column("dosage", sa.String(length=50), nullable=False),
        sa.Column("frequency", sa.String(length=50), nullable=False),
        sa.Column("duration_days", UNSIGNED_INT, nullable=False),
        sa.CheckConstraint("duration_days > 0", name=op.f("chk_duration")),
        sa.ForeignKeyConstraint(
            ["prescription_id"],
            ["prescriptions.prescription_id"],
            name="fk_pitem_rx",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["medication_id"],
            ["medications.medication_id"],
            name="fk_pitem_med",
            ondelete="RESTRICT",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "prescription_id", "medication_id", name=op.f("pk_prescription_items")
        ),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "invoices",
        sa.Column("invoice_id", ID, autoincrement=True, nullable=False),
        sa.Column("appointment_id", ID, nullable=False),
        sa.Column(
            "amount",
            sa.Numeric(precision=10, scale=2),
            server_default=sa.text("0.00"),
            nullable=False,
        ),
        sa.Column("status", _enum("invoice_status"), server_default="Pending", nullable=False),
        sa.Column("issued_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount >= 0", name=op.f("chk_amount_nonneg")),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.appointment_id"],
            name="fk_invoice_appt",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("invoice_id", name=op.f("pk_invoices")),
        sa.UniqueConstraint("appointment_id", name=op.f("uq_invoices_appointment_id")),
        **MYSQL_OPTIONS,
    )

    op.create_table(
        "payments",
        sa.Column("payment_id", ID, autoincrement=True, nullable=False),
        sa.Column("invoice_id", ID, nullable=False),
        sa.Column("amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("method", _enum("payment_method"), nullable=False),
        sa.Column("paid_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount > 0", name=op.f("chk_payment_amount")),
        sa.ForeignKeyConstraint(
            ["invoice_id"],
            ["invoices.invoice_id"],
            name="fk_payment_invoice",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        sa.PrimaryKeyConstraint("payment_id", name=op.f("pk_payments")),
        **MYSQL_OPTIONS,
    )
    op.create_index("idx_payment_invoice", "payments", ["invoice_id"], unique=False)
    op.create_index("idx_payment_paid_at", "payments", ["paid_at"], unique=False)


def downgrade():
    # indexes go with their tables
    op.drop_table("payments")
    op.drop_table("invoices")
    op.drop_table("prescription_items")
    op.drop_table("medications")
    op.drop_table("prescriptions")
    op.drop_table("appointments")
    op.drop_table("rooms")
    op.drop_table("doctor_specialty")
    op.drop_table("specialties")
    op.drop_table("doctors")
    op.drop_table("staff")
    op.drop_table("patient_profile")
    op.drop_table("patients")

    # PostgreSQL keeps enum types after their tables are gone
    if op.get_context().dialect.name == "postgresql":
        for name in ENUMS:
            op.execute(f"DROP TYPE IF EXISTS {name}")
