import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from clinic_booking.config.constants import InvoiceStatus, PaymentMethod
from clinic_booking.db.crud.common import (
    delete_or_raise,
    execute_or_raise,
    write_or_raise,
)
from clinic_booking.db.models import InvoiceModel, PaymentModel

logger = logging.getLogger(__name__)


async def create_invoice(
    db: AsyncSession,
    appointment_id: int,
    amount: Decimal = Decimal("0.00"),
    status: InvoiceStatus = InvoiceStatus.PENDING,
) -> InvoiceModel:
    """
    Bill an appointment. An appointment has at most one invoice.

    Args:
        db (AsyncSession): the database session
        appointment_id (int): the appointment being billed
        amount (Decimal): amount due, not negative
        status (InvoiceStatus): initial status, Pending by default

    Returns:
        InvoiceModel: the stored invoice

    Raises:
        CheckViolation: if the amount is negative
        UniqueViolation: if the appointment already has an invoice
        ForeignKeyViolation: if the appointment does not exist
    """
    logger.debug(f"CRUD: invoicing appointment_id={appointment_id} for {amount}")
    invoice = InvoiceModel(
        appointment_id=appointment_id,
        amount=Decimal(amount),
        status=InvoiceStatus(status),
    )
    async with write_or_raise(db, "create_invoice"):
        db.add(invoice)
    await db.refresh(invoice)
    logger.info(f"CRUD: created invoice_id={invoice.invoice_id}")
    return invoice


async def get_invoice_for_appointment(
    db: AsyncSession, appointment_id: int
) -> Optional[InvoiceModel]:
    """Get the invoice of an appointment with its payments loaded."""
    query = (
        select(InvoiceModel)
        .options(selectinload(InvoiceModel.payments))
        .where(InvoiceModel.appointment_id == appointment_id)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def set_invoice_status(
    db: AsyncSession, invoice_id: int, status: InvoiceStatus
) -> Optional[InvoiceModel]:
    """Set the status to any member of the enumerated set; transitions are not checked."""
    new_status = InvoiceStatus(status)
    invoice = await db.get(InvoiceModel, invoice_id)
    if invoice is None:
        logger.warning(f"CRUD: set_invoice_status - invoice_id={invoice_id} not found")
        return None

    stmt = (
        update(InvoiceModel)
        .where(InvoiceModel.invoice_id == invoice_id)
        .values(status=new_status)
        .execution_options(synchronize_session=False)
    )
    await execute_or_raise(db, stmt, "set_invoice_status")
    await db.refresh(invoice)
    logger.info(f"CRUD: invoice_id={invoice_id} status -> {new_status.value}")
    return invoice


async def record_payment(
    db: AsyncSession,
    invoice_id: int,
    amount: Decimal,
    method: PaymentMethod,
    paid_at: Optional[datetime] = None,
) -> PaymentModel:
    """
    Record a payment toward an invoice. Several payments per invoice are allowed
    and nothing compares their sum to the invoice amount.

    Raises:
        CheckViolation: if the amount is not strictly positive
        ForeignKeyViolation: if the invoice does not exist
    """
    logger.debug(f"CRUD: recording {method} payment of {amount} on invoice_id={invoice_id}")
    payment = PaymentModel(
        invoice_id=invoice_id,
        amount=Decimal(amount),
        method=PaymentMethod(method),
    )
    if paid_at is not None:
        payment.paid_at = paid_at
    async with write_or_raise(db, "record_payment"):
        db.add(payment)
    await db.refresh(payment)
    logger.info(f"CRUD: created payment_id={payment.payment_id} on invoice_id={invoice_id}")
    return payment


async def get_payments_for_invoice(db: AsyncSession, invoice_id: int) -> List[PaymentModel]:
    query = (
        select(PaymentModel)
        .where(PaymentModel.invoice_id == invoice_id)
        .order_by(PaymentModel.paid_at, PaymentModel.payment_id)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def delete_invoice(db: AsyncSession, invoice_id: int) -> bool:
    """Delete an invoice together with its payments."""
    stmt = delete(InvoiceModel).where(InvoiceModel.invoice_id == invoice_id)
    deleted = await delete_or_raise(db, stmt, "delete_invoice")
    logger.info(f"CRUD: delete invoice_id={invoice_id} -> {deleted}")
    return deleted
