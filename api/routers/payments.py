"""
Payment endpoints for simulated card payments and invoices.

  POST /api/payments                                  → pay a NEW booking (NEW → BOOKED)
  GET  /api/payments/{booking_id}/invoice             → invoice data
  GET  /api/payments/invoice/{booking_id}/download    → invoice PDF

No real processor is called: a valid-looking card always succeeds. Only
the masked card number is stored.
"""

import logging
import random
import string
import time
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
from models.customer import Customer
from models.payment import Payment
from schemas import ApiResponse
from schemas.payment import InvoiceData, PaymentRequest, PaymentResponse
from services.auth import ensure_owner_or_officer, require_role
from services.booking_status import apply_transition
from services.bookings import commit_booking_change, get_booking
from services.errors import StateConflict
from services.invoice import build_invoice_data, render_invoice_pdf

router = APIRouter()
logger = logging.getLogger(__name__)

any_user = require_role("CUSTOMER", "OFFICER")


def _mask_card(card_number: str) -> str:
    return f"**** **** **** {card_number[-4:]}"


def _reference(prefix: str) -> str:
    millis = int(time.time() * 1000)
    rand_part = "".join(random.choices(string.digits, k=3))
    return f"{prefix}{millis}{rand_part}"


def _payment_response(payment: Payment, booking_id: str, parcel_status: str) -> PaymentResponse:
    return PaymentResponse(
        payment_id=payment.payment_id,
        transaction_id=payment.transaction_id,
        invoice_number=payment.invoice_number,
        booking_id=booking_id,
        amount=float(payment.amount),
        cardholder_name=payment.cardholder_name,
        masked_card=payment.masked_card,
        payment_time=payment.payment_time,
        parcel_status=parcel_status,
    )


@router.post("", response_model=ApiResponse[PaymentResponse], status_code=201)
async def process_payment(
    data: PaymentRequest,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Pay for a booking.

    Exactly one payment per booking: a second attempt is rejected and the
    booking keeps the status the first payment gave it.
    """
    booking = await get_booking(db, data.booking_id)
    ensure_owner_or_officer(user, booking.customer_id)

    if booking.payment is not None:
        raise StateConflict(f"Payment already exists for booking {booking.booking_id}")

    # Validates NEW → BOOKED before anything is written
    event = apply_transition(booking, "BOOKED", "SYSTEM", user.id, "Payment received")

    now = datetime.utcnow()
    payment = Payment(
        booking=booking,
        payment_id=_reference("PAY"),
        transaction_id=f"TXN{uuid.uuid4().hex[:12].upper()}",
        invoice_number=_reference("INV"),
        amount=booking.parcel_service_cost,
        cardholder_name=data.cardholder_name,
        masked_card=_mask_card(data.card_number),
        payment_time=now,
    )
    booking.parcel_payment_time = now
    db.add_all([payment, event])
    await commit_booking_change(
        db, booking,
        conflict_message=f"Payment already exists for booking {data.booking_id}",
    )

    logger.info(
        "Payment %s for booking %s: amount=%s card=%s",
        payment.payment_id, booking.booking_id, payment.amount, payment.masked_card,
    )
    return ApiResponse(
        message="Payment processed successfully",
        data=_payment_response(payment, booking.booking_id, booking.parcel_status),
    )


@router.get("/{booking_id}/invoice", response_model=ApiResponse[InvoiceData])
async def get_invoice(
    booking_id: str,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)

    invoice = build_invoice_data(booking, booking.payment)
    return ApiResponse(message="Invoice generated successfully", data=invoice)


@router.get("/invoice/{booking_id}/download")
async def download_invoice_pdf(
    booking_id: str,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    """Invoice as a PDF attachment."""
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)

    pdf = render_invoice_pdf(build_invoice_data(booking, booking.payment))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice_{booking.booking_id}.pdf"'},
    )
