"""Pydantic schemas for payment and invoice endpoints."""

from datetime import datetime
from pydantic import BaseModel, Field


class PaymentRequest(BaseModel):
    """Simulated card payment; the card is never stored beyond its last four digits."""
    booking_id: str = Field(..., min_length=1, max_length=30)
    card_number: str = Field(..., pattern=r"^\d{13,19}$")
    cardholder_name: str = Field(..., min_length=2, max_length=255)
    expiry_date: str = Field(..., pattern=r"^(0[1-9]|1[0-2])/\d{2}$")
    cvv: str = Field(..., pattern=r"^\d{3,4}$")


class PaymentResponse(BaseModel):
    payment_id: str
    transaction_id: str
    invoice_number: str
    booking_id: str
    amount: float
    cardholder_name: str
    masked_card: str
    payment_time: datetime
    parcel_status: str


class InvoiceData(BaseModel):
    booking_id: str
    invoice_number: str
    payment_id: str | None
    transaction_id: str | None
    customer_name: str
    receiver_name: str
    receiver_address: str
    receiver_pin: str
    receiver_mobile: str
    parcel_weight_in_gram: int
    parcel_contents_description: str
    parcel_delivery_type: str
    parcel_packing_preference: str
    parcel_pickup_time: datetime | None
    parcel_dropoff_time: datetime | None
    payment_time: datetime | None
    masked_card: str | None
    service_cost: float
    currency: str = "INR"
    parcel_status: str
