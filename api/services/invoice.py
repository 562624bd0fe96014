"""
Invoice Service — invoice data assembly and PDF rendering.

A booking is invoiceable once it is paid: either a Payment row exists
(customer flow) or it is an officer booking, paid at the counter.
"""

import io
import logging
from datetime import datetime
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from config import settings
from models.booking import Booking
from models.payment import Payment
from schemas.payment import InvoiceData
from services.errors import StateConflict

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d %b %Y, %H:%M"


def invoice_number_for(booking: Booking, payment: Payment | None) -> str:
    if payment is not None:
        return payment.invoice_number
    return f"INV{booking.booking_id.removeprefix('BK')}"


def build_invoice_data(booking: Booking, payment: Payment | None) -> InvoiceData:
    """Collect everything printed on an invoice; refuses unpaid bookings."""
    if payment is None and not booking.is_officer_booking:
        raise StateConflict(f"Booking {booking.booking_id} has not been paid yet")

    return InvoiceData(
        booking_id=booking.booking_id,
        invoice_number=invoice_number_for(booking, payment),
        payment_id=payment.payment_id if payment else None,
        transaction_id=payment.transaction_id if payment else None,
        customer_name=booking.customer.customer_name if booking.customer else "",
        receiver_name=booking.receiver_name,
        receiver_address=booking.receiver_address,
        receiver_pin=booking.receiver_pin,
        receiver_mobile=booking.receiver_mobile,
        parcel_weight_in_gram=booking.parcel_weight_in_gram,
        parcel_contents_description=booking.parcel_contents_description,
        parcel_delivery_type=booking.parcel_delivery_type,
        parcel_packing_preference=booking.parcel_packing_preference,
        parcel_pickup_time=booking.parcel_pickup_time,
        parcel_dropoff_time=booking.parcel_dropoff_time,
        payment_time=payment.payment_time if payment else booking.parcel_payment_time or booking.created_at,
        masked_card=payment.masked_card if payment else None,
        service_cost=float(booking.parcel_service_cost),
        currency=settings.CURRENCY,
        parcel_status=booking.parcel_status,
    )


def _fmt_date(value: datetime | None) -> str:
    return value.strftime(DATE_FORMAT) if value else "-"


def _section(title: str, rows: list[tuple[str, str]], styles) -> list:
    table = Table(
        # Value cells wrap within the column
        [[label, Paragraph(escape(str(value)), styles["BodyText"])] for label, value in rows],
        colWidths=[55 * mm, 110 * mm],
    )
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#64748b")),
        ("LINEBELOW", (0, 0), (-1, -2), 0.25, colors.HexColor("#e2e8f0")),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return [Paragraph(title, styles["Heading3"]), table, Spacer(1, 6 * mm)]


def render_invoice_pdf(invoice: InvoiceData) -> bytes:
    """Render the invoice as a single-page A4 PDF."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=A4,
        title=f"Invoice {invoice.invoice_number}",
        leftMargin=20 * mm, rightMargin=20 * mm, topMargin=20 * mm, bottomMargin=20 * mm,
    )
    styles = getSampleStyleSheet()

    story = [
        Paragraph("Invoice &amp; Receipt", styles["Title"]),
        Spacer(1, 4 * mm),
    ]
    story += _section("Invoice Details", [
        ("Booking ID", invoice.booking_id),
        ("Invoice Number", invoice.invoice_number),
        ("Payment ID", invoice.payment_id or "Paid at counter"),
        ("Transaction ID", invoice.transaction_id or "-"),
        ("Customer", invoice.customer_name),
    ], styles)
    story += _section("Receiver Information", [
        ("Name", invoice.receiver_name),
        ("Phone", invoice.receiver_mobile),
        ("Address", invoice.receiver_address),
        ("PIN Code", invoice.receiver_pin),
    ], styles)
    story += _section("Parcel Information", [
        ("Weight", f"{invoice.parcel_weight_in_gram} g"),
        ("Contents", invoice.parcel_contents_description),
        ("Delivery Type", invoice.parcel_delivery_type),
        ("Packing Preference", invoice.parcel_packing_preference),
    ], styles)
    story += _section("Timing Information", [
        ("Pickup Time", _fmt_date(invoice.parcel_pickup_time)),
        ("Drop-off Time", _fmt_date(invoice.parcel_dropoff_time)),
        ("Payment Time", _fmt_date(invoice.payment_time)),
    ], styles)
    story += _section("Payment Information", [
        ("Service Cost", f"{invoice.currency} {invoice.service_cost:.2f}"),
        ("Payment Type", "Credit/Debit Card" if invoice.masked_card else "Counter"),
        ("Card", invoice.masked_card or "-"),
        ("Status", "PAID"),
    ], styles)

    doc.build(story)
    pdf = buffer.getvalue()
    logger.info("Invoice PDF rendered for booking %s (%d bytes)", invoice.booking_id, len(pdf))
    return pdf
