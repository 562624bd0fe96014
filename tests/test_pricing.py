"""Tests for the pricing engine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

from decimal import Decimal

from services.pricing import (
    calculate_price, calculate_service_cost, delivery_charge, packing_charge,
    round_currency, ADMIN_FEE, BASE_RATE,
)


def test_standard_basic_one_kilo():
    """(50 + 20 + 30 + 10) × 1.05 = 115.5 → 116."""
    assert calculate_service_cost(1000, "STANDARD", "BASIC") == Decimal("116")


def test_officer_express_premium_five_kilo():
    """(50 + 100 + 80 + 20 + 50) × 1.05 = 315."""
    assert calculate_service_cost(5000, "EXPRESS", "PREMIUM", True) == Decimal("315")


def test_same_day_is_most_expensive():
    standard = calculate_service_cost(1000, "STANDARD", "BASIC")
    express = calculate_service_cost(1000, "EXPRESS", "BASIC")
    same_day = calculate_service_cost(1000, "SAME_DAY", "BASIC")
    assert standard < express < same_day


def test_premium_packing_costs_more():
    assert calculate_service_cost(1000, "STANDARD", "PREMIUM") > calculate_service_cost(1000, "STANDARD", "BASIC")


def test_cost_non_decreasing_in_weight():
    """Heavier parcels never cost less."""
    costs = [calculate_service_cost(w, "EXPRESS", "BASIC") for w in range(1, 20001, 250)]
    assert costs == sorted(costs)


def test_officer_fee_never_lowers_price():
    for delivery in ("STANDARD", "EXPRESS", "SAME_DAY"):
        for packing in ("BASIC", "PREMIUM"):
            customer = calculate_service_cost(1500, delivery, packing)
            officer = calculate_service_cost(1500, delivery, packing, True)
            assert officer >= customer


def test_admin_fee_only_for_officer():
    assert calculate_price(1000, "STANDARD", "BASIC").admin_fee == Decimal("0")
    assert calculate_price(1000, "STANDARD", "BASIC", True).admin_fee == ADMIN_FEE


def test_unknown_values_fall_back_to_defaults():
    """Unknown delivery type costs like STANDARD, unknown packing like BASIC."""
    assert delivery_charge("TELEPORT") == delivery_charge("STANDARD")
    assert packing_charge("GIFT_WRAP") == packing_charge("BASIC")
    assert calculate_service_cost(1000, None, None) == Decimal("116")


def test_accepts_lowercase_and_enum_values():
    from schemas import DeliveryType, PackingPreference
    assert calculate_service_cost(1000, "express", "premium") == calculate_service_cost(
        1000, DeliveryType.EXPRESS, PackingPreference.PREMIUM,
    )


def test_breakdown_adds_up():
    price = calculate_price(1234, "EXPRESS", "PREMIUM", True)
    assert price.base_rate == BASE_RATE
    assert price.weight_charge == Decimal("24.68")
    assert price.subtotal == (
        price.base_rate + price.weight_charge + price.delivery_charge
        + price.packing_charge + price.admin_fee
    )
    assert price.total_cost == round_currency(price.subtotal + price.tax)
    assert price.total_cost == calculate_service_cost(1234, "EXPRESS", "PREMIUM", True)


def test_rounding_is_half_up():
    assert round_currency(Decimal("115.5")) == Decimal("116")
    assert round_currency(Decimal("115.49")) == Decimal("115")
    assert round_currency(Decimal("116.5")) == Decimal("117")


def test_returns_decimal():
    assert isinstance(calculate_service_cost(700, "STANDARD", "BASIC"), Decimal)
