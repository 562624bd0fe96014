"""Tests for the booking status state machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

import pytest

from models.booking import Booking
from schemas import ParcelStatus
from services.booking_status import (
    allowed_transitions, apply_transition, assert_transition, can_transition,
    is_terminal, BOOKING_TRANSITIONS, TERMINAL_STATUSES,
)
from services.errors import InvalidStatusTransition, StateConflict


def _booking(status: str) -> Booking:
    return Booking(booking_id="BK1700000000000", parcel_status=status)


def test_happy_path_transitions():
    assert can_transition("NEW", "BOOKED")
    assert can_transition("BOOKED", "IN_TRANSIT")
    assert can_transition("IN_TRANSIT", "DELIVERED")
    assert can_transition("BOOKED", "CANCELLED")


def test_terminal_states_have_no_exits():
    assert TERMINAL_STATUSES == {"DELIVERED", "CANCELLED"}
    for status in TERMINAL_STATUSES:
        assert allowed_transitions(status) == frozenset()
        assert is_terminal(status)


def test_every_status_has_an_entry():
    assert set(BOOKING_TRANSITIONS) == {s.value for s in ParcelStatus}


@pytest.mark.parametrize("current,target", [
    ("NEW", "IN_TRANSIT"),
    ("NEW", "DELIVERED"),
    ("NEW", "CANCELLED"),
    ("BOOKED", "DELIVERED"),
    ("IN_TRANSIT", "CANCELLED"),
    ("IN_TRANSIT", "BOOKED"),
    ("DELIVERED", "IN_TRANSIT"),
    ("CANCELLED", "BOOKED"),
])
def test_invalid_transitions_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStatusTransition):
        assert_transition(current, target)


def test_rejection_is_a_state_conflict():
    with pytest.raises(StateConflict) as exc:
        assert_transition("IN_TRANSIT", "CANCELLED", "BK42")
    assert exc.value.status_code == 409
    assert "BK42" in exc.value.message
    assert "only BOOKED parcels can be cancelled" in exc.value.message


def test_enum_members_accepted():
    assert can_transition(ParcelStatus.BOOKED, ParcelStatus.IN_TRANSIT)


def test_apply_transition_mutates_and_records_event():
    booking = _booking("IN_TRANSIT")
    event = apply_transition(booking, "DELIVERED", "OFFICER", 7, "Left at door")

    assert booking.parcel_status == "DELIVERED"
    assert booking.delivered_at is not None
    assert event.from_status == "IN_TRANSIT"
    assert event.to_status == "DELIVERED"
    assert event.actor_type == "OFFICER"
    assert event.actor_id == 7
    assert event in booking.events


def test_apply_transition_stamps_cancellation():
    booking = _booking("BOOKED")
    apply_transition(booking, "CANCELLED", "CUSTOMER", 3)
    assert booking.parcel_status == "CANCELLED"
    assert booking.cancelled_at is not None
    assert booking.delivered_at is None


def test_rejected_transition_leaves_booking_untouched():
    booking = _booking("DELIVERED")
    with pytest.raises(InvalidStatusTransition):
        apply_transition(booking, "CANCELLED", "CUSTOMER", 3)
    assert booking.parcel_status == "DELIVERED"
    assert booking.cancelled_at is None
    assert list(booking.events) == []
