"""Booking management API endpoints."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from db.database import get_db
from models.booking import Booking
from models.customer import Customer
from schemas import (
    ApiResponse, BookingCreate, BookingEventResponse, BookingResponse,
    BookingStatusUpdate, BookingTrackingResponse, CancelBookingRequest,
    OfficerBookingCreate, Page, ParcelStatus, PriceEstimate, PriceEstimateRequest,
)
from services.auth import ensure_owner_or_officer, require_role
from services.booking_status import OFFICER_UPDATABLE_STATUSES, apply_transition
from services.bookings import commit_booking_change, get_booking, new_booking
from services.errors import NotFound, ValidationFailed
from services.pagination import PageRequest, page_payload, paginate
from services.pricing import calculate_price

router = APIRouter()
logger = logging.getLogger(__name__)

customer_only = require_role("CUSTOMER")
officer_only = require_role("OFFICER")
any_user = require_role("CUSTOMER", "OFFICER")


def _page_params(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, gt=0, le=settings.MAX_PAGE_SIZE),
) -> PageRequest:
    return PageRequest(page=page, size=size)


def _newest_first(query):
    return query.order_by(Booking.created_at.desc(), Booking.id.desc())


@router.post("/estimate", response_model=PriceEstimate)
async def estimate_price(data: PriceEstimateRequest, officer: bool = False):
    """Price breakdown without creating a booking."""
    price = calculate_price(
        data.parcel_weight_in_gram,
        data.parcel_delivery_type,
        data.parcel_packing_preference,
        is_officer_booking=officer,
    )
    return PriceEstimate(
        weight_in_grams=price.weight_in_grams,
        delivery_type=price.delivery_type,
        packing_preference=price.packing_preference,
        is_officer_booking=price.is_officer_booking,
        base_rate=float(price.base_rate),
        weight_charge=float(price.weight_charge),
        delivery_charge=float(price.delivery_charge),
        packing_charge=float(price.packing_charge),
        admin_fee=float(price.admin_fee),
        subtotal=float(price.subtotal),
        tax_rate=float(price.tax_rate),
        tax=float(price.tax),
        total_cost=float(price.total_cost),
        currency=settings.CURRENCY,
    )


@router.post("/", response_model=ApiResponse[BookingResponse], status_code=201)
async def create_booking(
    data: BookingCreate,
    user: Customer = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """Customer self-service booking; starts NEW until paid."""
    booking = new_booking(data, owner=user, created_by=user)
    db.add(booking)
    await commit_booking_change(db, booking)

    logger.info(
        "Booking %s created by %s: %sg %s/%s cost=%s",
        booking.booking_id, user.unique_id, booking.parcel_weight_in_gram,
        booking.parcel_delivery_type, booking.parcel_packing_preference, booking.parcel_service_cost,
    )
    return ApiResponse(
        message="Booking created successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.post("/officer", response_model=ApiResponse[BookingResponse], status_code=201)
async def create_officer_booking(
    data: OfficerBookingCreate,
    officer: Customer = Depends(officer_only),
    db: AsyncSession = Depends(get_db),
):
    """Officer-assisted booking; admin fee applied, starts BOOKED (paid at the counter)."""
    owner = officer
    if data.customer_unique_id:
        result = await db.execute(
            select(Customer).where(
                Customer.unique_id == data.customer_unique_id,
                Customer.role == "CUSTOMER",
            )
        )
        owner = result.scalar_one_or_none()
        if owner is None:
            raise NotFound(f"Customer {data.customer_unique_id} not found")

    booking = new_booking(data, owner=owner, created_by=officer, is_officer_booking=True)
    db.add(booking)
    await commit_booking_change(db, booking)

    logger.info(
        "Officer booking %s created by %s for %s cost=%s",
        booking.booking_id, officer.unique_id, owner.unique_id, booking.parcel_service_cost,
    )
    return ApiResponse(
        message="Booking created successfully",
        data=BookingResponse.model_validate(booking),
    )


@router.get("/", response_model=Page[BookingResponse])
async def list_my_bookings(
    booking_id: str | None = Query(None, max_length=30),
    status: ParcelStatus | None = None,
    page_request: PageRequest = Depends(_page_params),
    user: Customer = Depends(customer_only),
    db: AsyncSession = Depends(get_db),
):
    """The caller's bookings, newest first, optionally filtered."""
    query = select(Booking).where(Booking.customer_id == user.id)
    if booking_id and booking_id.strip():
        query = query.where(Booking.booking_id.icontains(booking_id.strip(), autoescape=True))
    if status:
        query = query.where(Booking.parcel_status == status.value)

    items, total = await paginate(db, _newest_first(query), page_request)
    return page_payload(items, total, page_request)


@router.get("/officer", response_model=Page[BookingResponse])
async def list_all_bookings(
    status: ParcelStatus | None = None,
    page_request: PageRequest = Depends(_page_params),
    officer: Customer = Depends(officer_only),
    db: AsyncSession = Depends(get_db),
):
    """All bookings for officers, newest first."""
    query = select(Booking)
    if status:
        query = query.where(Booking.parcel_status == status.value)

    items, total = await paginate(db, _newest_first(query), page_request)
    return page_payload(items, total, page_request)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_details(
    booking_id: str,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)
    return booking


@router.get("/{booking_id}/track", response_model=BookingTrackingResponse)
async def track_booking(
    booking_id: str,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    """Current status plus the full status history."""
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)

    return BookingTrackingResponse(
        booking_id=booking.booking_id,
        parcel_status=booking.parcel_status,
        receiver_name=booking.receiver_name,
        receiver_address=booking.receiver_address,
        parcel_pickup_time=booking.parcel_pickup_time,
        parcel_dropoff_time=booking.parcel_dropoff_time,
        delivered_at=booking.delivered_at,
        cancelled_at=booking.cancelled_at,
        history=[BookingEventResponse.model_validate(e) for e in booking.events],
    )


@router.patch("/{booking_id}/status", response_model=ApiResponse[BookingResponse])
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    officer: Customer = Depends(officer_only),
    db: AsyncSession = Depends(get_db),
):
    """Officer delivery progression: BOOKED → IN_TRANSIT → DELIVERED."""
    if data.status.value not in OFFICER_UPDATABLE_STATUSES:
        raise ValidationFailed(
            "Status can only be set to IN_TRANSIT or DELIVERED; use the cancel endpoint to cancel"
        )

    booking = await get_booking(db, booking_id)
    old_status = booking.parcel_status
    event = apply_transition(booking, data.status, "OFFICER", officer.id, data.note)
    db.add(event)
    await commit_booking_change(db, booking)

    logger.info("Booking %s: %s -> %s by %s", booking_id, old_status, booking.parcel_status, officer.unique_id)
    return ApiResponse(
        message=f"Booking status updated to {booking.parcel_status}",
        data=BookingResponse.model_validate(booking),
    )


@router.post("/{booking_id}/cancel", response_model=ApiResponse[BookingResponse])
async def cancel_booking(
    booking_id: str,
    data: CancelBookingRequest | None = None,
    user: Customer = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a BOOKED parcel (owner or officer) before it goes in transit."""
    booking = await get_booking(db, booking_id)
    ensure_owner_or_officer(user, booking.customer_id)

    event = apply_transition(booking, "CANCELLED", user.role, user.id, data.reason if data else None)
    db.add(event)
    await commit_booking_change(db, booking)

    logger.info("Booking %s cancelled by %s", booking_id, user.unique_id)
    return ApiResponse(
        message="Booking cancelled successfully",
        data=BookingResponse.model_validate(booking),
    )
