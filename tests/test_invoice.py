"""Tests for invoice assembly and PDF rendering."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

from datetime import datetime
from decimal import Decimal

import pytest
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph

from models.booking import Booking
from models.customer import Customer
from models.payment import Payment
from services.errors import StateConflict
from services.invoice import _section, build_invoice_data, invoice_number_for, render_invoice_pdf


def _booking(is_officer_booking: bool = False) -> Booking:
    return Booking(
        booking_id="BK17000000000001234",
        customer=Customer(customer_name="Asha & Sons", unique_id="CUST12345"),
        receiver_name="Ravi Kumar",
        receiver_address="45 Park Street, Kolkata",
        receiver_pin="700016",
        receiver_mobile="9123456780",
        parcel_weight_in_gram=2000,
        parcel_contents_description="Books",
        parcel_delivery_type="STANDARD",
        parcel_packing_preference="BASIC",
        parcel_service_cost=Decimal("137"),
        is_officer_booking=is_officer_booking,
        parcel_status="BOOKED",
        created_at=datetime(2024, 5, 1, 10, 30),
    )


def _payment() -> Payment:
    return Payment(
        payment_id="PAY1700000000000123",
        transaction_id="TXNABCDEF123456",
        invoice_number="INV1700000000000456",
        amount=Decimal("137"),
        cardholder_name="Asha Verma",
        masked_card="**** **** **** 1111",
        payment_time=datetime(2024, 5, 1, 10, 35),
    )


def test_unpaid_customer_booking_not_invoiceable():
    with pytest.raises(StateConflict):
        build_invoice_data(_booking(), None)


def test_paid_booking_invoice_data():
    invoice = build_invoice_data(_booking(), _payment())
    assert invoice.invoice_number == "INV1700000000000456"
    assert invoice.service_cost == 137.0
    assert invoice.masked_card == "**** **** **** 1111"
    assert invoice.customer_name == "Asha & Sons"


def test_officer_booking_invoiced_without_payment():
    booking = _booking(is_officer_booking=True)
    invoice = build_invoice_data(booking, None)
    assert invoice.payment_id is None
    assert invoice.invoice_number == invoice_number_for(booking, None)
    assert invoice.invoice_number.startswith("INV")
    assert invoice.payment_time == datetime(2024, 5, 1, 10, 30)


def test_pdf_rendering():
    pdf = render_invoice_pdf(build_invoice_data(_booking(), _payment()))
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_long_values_wrap_in_table_cells():
    """Values are laid out as Paragraphs, with markup characters escaped."""
    address = "Flat 4B, " + "Very Long Residency Road Extension, " * 12 + "Bengaluru"
    _, table, _ = _section("Receiver Information", [
        ("Address", address),
        ("Name", "Asha & Sons <Logistics>"),
    ], getSampleStyleSheet())

    cells = [row[1] for row in table._cellvalues]
    assert all(isinstance(cell, Paragraph) for cell in cells)
    assert cells[1].getPlainText() == "Asha & Sons <Logistics>"


def test_pdf_rendering_with_long_address():
    booking = _booking()
    booking.receiver_address = "Plot 17, " + "Industrial Estate Service Lane, " * 15 + "Kolkata"
    pdf = render_invoice_pdf(build_invoice_data(booking, _payment()))
    assert pdf.startswith(b"%PDF")
