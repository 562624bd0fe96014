"""
Booking status state machine.

    NEW ──payment──▶ BOOKED ──officer──▶ IN_TRANSIT ──officer──▶ DELIVERED
                       │
                       └──cancel──▶ CANCELLED

DELIVERED and CANCELLED are terminal. Officer-created bookings start at
BOOKED; customer bookings start at NEW until paid.
"""

from datetime import datetime

from models.booking import Booking, BookingEvent
from services.errors import InvalidStatusTransition

INITIAL_CUSTOMER_STATUS = "NEW"
INITIAL_OFFICER_STATUS = "BOOKED"

BOOKING_TRANSITIONS: dict[str, frozenset[str]] = {
    "NEW": frozenset({"BOOKED"}),
    "BOOKED": frozenset({"IN_TRANSIT", "CANCELLED"}),
    "IN_TRANSIT": frozenset({"DELIVERED"}),
    "DELIVERED": frozenset(),
    "CANCELLED": frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in BOOKING_TRANSITIONS.items() if not targets)

# Targets an officer may set through the status-update endpoint
OFFICER_UPDATABLE_STATUSES = frozenset({"IN_TRANSIT", "DELIVERED"})


def _value(status) -> str:
    return str(getattr(status, "value", status))


def allowed_transitions(status) -> frozenset[str]:
    return BOOKING_TRANSITIONS.get(_value(status), frozenset())


def can_transition(current, target) -> bool:
    return _value(target) in allowed_transitions(current)


def is_terminal(status) -> bool:
    return _value(status) in TERMINAL_STATUSES


def _rejection_message(booking_id: str | None, current: str, target: str) -> str:
    label = f"Booking {booking_id}" if booking_id else "Booking"
    if current in TERMINAL_STATUSES:
        return f"{label} is already {current}; no further status changes are allowed"
    if target == "CANCELLED":
        return f"{label} cannot be cancelled once it is {current}; only BOOKED parcels can be cancelled"
    if target == "BOOKED":
        return f"{label} is {current}; only NEW bookings can be confirmed by payment"
    return f"{label} cannot move from {current} to {target}"


def assert_transition(current, target, booking_id: str | None = None) -> None:
    """Raise InvalidStatusTransition unless current → target is allowed."""
    current, target = _value(current), _value(target)
    if target not in allowed_transitions(current):
        raise InvalidStatusTransition(current, target, _rejection_message(booking_id, current, target))


def apply_transition(
    booking: Booking,
    target,
    actor_type: str,
    actor_id: int | None = None,
    note: str | None = None,
) -> BookingEvent:
    """
    Move a booking to ``target`` and return the audit event to persist.

    The booking is left untouched when the transition is rejected.
    """
    target = _value(target)
    old_status = booking.parcel_status
    assert_transition(old_status, target, booking.booking_id)

    booking.parcel_status = target
    now = datetime.utcnow()
    if target == "DELIVERED":
        booking.delivered_at = now
    elif target == "CANCELLED":
        booking.cancelled_at = now

    return BookingEvent(
        booking=booking,
        from_status=old_status,
        to_status=target,
        actor_type=actor_type,
        actor_id=actor_id,
        note=note,
    )
