"""Pydantic schemas for API request/response models."""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar
from pydantic import BaseModel, EmailStr, Field, model_validator

T = TypeVar("T")


# ── Enums ──────────────────────────────────────────────────

class UserRole(str, Enum):
    CUSTOMER = "CUSTOMER"
    OFFICER = "OFFICER"


class DeliveryType(str, Enum):
    STANDARD = "STANDARD"
    EXPRESS = "EXPRESS"
    SAME_DAY = "SAME_DAY"


class PackingPreference(str, Enum):
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"


class ParcelStatus(str, Enum):
    NEW = "NEW"
    BOOKED = "BOOKED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# ── Envelopes ──────────────────────────────────────────────

class ApiResponse(BaseModel, Generic[T]):
    """Uniform result of every mutating endpoint."""
    success: bool = True
    message: str
    data: T | None = None


class Page(BaseModel, Generic[T]):
    items: list[T]
    total_elements: int
    total_pages: int
    current_page: int
    page_size: int


class FieldError(BaseModel):
    field: str
    message: str


# ── Auth Schemas ───────────────────────────────────────────

class RegisterRequest(BaseModel):
    customer_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    country_code: str = Field("+91", pattern=r"^\+\d{1,4}$")
    mobile_number: str = Field(..., pattern=r"^\d{10}$")
    address: str = Field(..., min_length=5)
    role: UserRole = UserRole.CUSTOMER
    preferences: str | None = Field(None, max_length=100)


class LoginRequest(BaseModel):
    unique_id: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=1)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    id: int
    unique_id: str
    customer_name: str
    email: str
    country_code: str
    mobile_number: str
    address: str
    role: str
    get_updates_via: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class AuthData(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserProfile


# ── Booking Schemas ────────────────────────────────────────

def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PriceEstimateRequest(BaseModel):
    parcel_weight_in_gram: int = Field(..., gt=0)
    parcel_delivery_type: DeliveryType
    parcel_packing_preference: PackingPreference


class PriceEstimate(BaseModel):
    weight_in_grams: int
    delivery_type: str
    packing_preference: str
    is_officer_booking: bool
    base_rate: float
    weight_charge: float
    delivery_charge: float
    packing_charge: float
    admin_fee: float
    subtotal: float
    tax_rate: float
    tax: float
    total_cost: float
    currency: str = "INR"


class BookingCreate(BaseModel):
    receiver_name: str = Field(..., min_length=2, max_length=255)
    receiver_address: str = Field(..., min_length=5)
    receiver_pin: str = Field(..., pattern=r"^\d{6}$")
    receiver_mobile: str = Field(..., pattern=r"^\d{10}$")
    parcel_weight_in_gram: int = Field(..., gt=0)
    parcel_contents_description: str = Field(..., min_length=1, max_length=500)
    parcel_delivery_type: DeliveryType
    parcel_packing_preference: PackingPreference
    parcel_pickup_time: datetime | None = None
    parcel_dropoff_time: datetime | None = None

    @model_validator(mode="after")
    def _dropoff_after_pickup(self):
        if self.parcel_pickup_time is None or self.parcel_dropoff_time is None:
            return self
        if _as_utc(self.parcel_dropoff_time) < _as_utc(self.parcel_pickup_time):
            raise ValueError("parcel_dropoff_time must not be before parcel_pickup_time")
        return self


class OfficerBookingCreate(BookingCreate):
    # Customer the officer is booking for; the officer owns the booking when omitted
    customer_unique_id: str | None = Field(None, max_length=20)


class BookingResponse(BaseModel):
    id: int
    booking_id: str
    customer_id: int
    created_by_id: int | None
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
    parcel_service_cost: float
    is_officer_booking: bool
    parcel_payment_time: datetime | None
    parcel_status: str
    created_at: datetime
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    class Config:
        from_attributes = True


class BookingStatusUpdate(BaseModel):
    status: ParcelStatus
    note: str | None = Field(None, max_length=255)


class CancelBookingRequest(BaseModel):
    reason: str | None = Field(None, max_length=255)


class BookingEventResponse(BaseModel):
    from_status: str | None
    to_status: str
    actor_type: str
    note: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class BookingTrackingResponse(BaseModel):
    booking_id: str
    parcel_status: str
    receiver_name: str
    receiver_address: str
    parcel_pickup_time: datetime | None
    parcel_dropoff_time: datetime | None
    delivered_at: datetime | None
    cancelled_at: datetime | None
    history: list[BookingEventResponse]
