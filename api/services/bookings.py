"""Booking helpers shared by the booking, payment and feedback routers."""

import logging
import random
import string
import time

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from models.booking import Booking, BookingEvent
from models.customer import Customer
from schemas import BookingCreate
from services.booking_status import INITIAL_CUSTOMER_STATUS, INITIAL_OFFICER_STATUS
from services.errors import NotFound, StateConflict
from services.pricing import calculate_service_cost

logger = logging.getLogger(__name__)


def generate_booking_id() -> str:
    """Generate booking id: BK + epoch millis + 4 random digits."""
    millis = int(time.time() * 1000)
    rand_part = "".join(random.choices(string.digits, k=4))
    return f"BK{millis}{rand_part}"


def new_booking(
    data: BookingCreate,
    owner: Customer,
    created_by: Customer,
    is_officer_booking: bool = False,
) -> Booking:
    """Build a priced booking in its initial status, with its first audit event."""
    status = INITIAL_OFFICER_STATUS if is_officer_booking else INITIAL_CUSTOMER_STATUS
    cost = calculate_service_cost(
        data.parcel_weight_in_gram,
        data.parcel_delivery_type,
        data.parcel_packing_preference,
        is_officer_booking,
    )

    booking = Booking(
        booking_id=generate_booking_id(),
        customer=owner,
        created_by_id=created_by.id,
        receiver_name=data.receiver_name,
        receiver_address=data.receiver_address,
        receiver_pin=data.receiver_pin,
        receiver_mobile=data.receiver_mobile,
        parcel_weight_in_gram=data.parcel_weight_in_gram,
        parcel_contents_description=data.parcel_contents_description,
        parcel_delivery_type=data.parcel_delivery_type.value,
        parcel_packing_preference=data.parcel_packing_preference.value,
        parcel_pickup_time=data.parcel_pickup_time,
        parcel_dropoff_time=data.parcel_dropoff_time,
        parcel_service_cost=cost,
        is_officer_booking=is_officer_booking,
        parcel_status=status,
    )
    booking.events.append(BookingEvent(
        from_status=None,
        to_status=status,
        actor_type=created_by.role,
        actor_id=created_by.id,
    ))
    return booking


async def get_booking(db: AsyncSession, booking_id: str) -> Booking:
    result = await db.execute(select(Booking).where(Booking.booking_id == booking_id))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFound(f"Booking {booking_id} not found")
    return booking


async def commit_booking_change(db: AsyncSession, booking: Booking, conflict_message: str | None = None) -> None:
    """
    Commit a booking mutation.

    A concurrent writer (stale version) or a unique-constraint hit is reported
    as a StateConflict after rolling back, so nothing is half-applied.
    """
    booking_id = booking.booking_id
    try:
        await db.commit()
    except (StaleDataError, IntegrityError) as e:
        await db.rollback()
        logger.warning("Booking %s write rejected: %s", booking_id, e)
        raise StateConflict(
            conflict_message or f"Booking {booking_id} was modified by another request; reload and retry"
        ) from e
    await db.refresh(booking)
