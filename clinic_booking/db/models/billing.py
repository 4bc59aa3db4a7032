# clinic_booking/db/models/billing.py
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    func,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql.elements import conv

from clinic_booking.config.constants import InvoiceStatus, PaymentMethod
from clinic_booking.db.base import Base, Identifier, enum_column_type, table_args


class InvoiceModel(Base):
    __tablename__ = "invoices"
    __table_args__ = table_args(
        CheckConstraint("amount >= 0", name=conv("chk_amount_nonneg")),
    )

    invoice_id = Column(Identifier, primary_key=True, autoincrement=True)
    # unique FK makes the invoice 1:1 with its appointment
    appointment_id = Column(
        Identifier,
        ForeignKey(
            "appointments.appointment_id",
            name="fk_invoice_appt",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
        unique=True,
    )
    amount = Column(
        Numeric(10, 2), nullable=False, default=0, server_default=text("0.00")
    )
    status = Column(
        enum_column_type(InvoiceStatus, "invoice_status"),
        nullable=False,
        default=InvoiceStatus.PENDING,
        server_default=InvoiceStatus.PENDING.value,
    )
    issued_at = Column(DateTime, nullable=False, server_default=func.now())

    appointment = relationship("AppointmentModel", back_populates="invoice")
    payments = relationship(
        "PaymentModel",
        back_populates="invoice",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PaymentModel(Base):
    __tablename__ = "payments"
    __table_args__ = table_args(
        CheckConstraint("amount > 0", name=conv("chk_payment_amount")),
        Index("idx_payment_invoice", "invoice_id"),
        Index("idx_payment_paid_at", "paid_at"),
    )

    payment_id = Column(Identifier, primary_key=True, autoincrement=True)
    invoice_id = Column(
        Identifier,
        ForeignKey(
            "invoices.invoice_id",
            name="fk_payment_invoice",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
    )
    amount  = Column(Numeric(10, 2), nullable=False)
    method  = Column(enum_column_type(PaymentMethod, "payment_method"), nullable=False)
    paid_at = Column(DateTime, nullable=False, server_default=func.now())

    invoice = relationship("InvoiceModel", back_populates="payments")
