"""
Pricing Engine — service cost for a parcel booking.

    total = round((base + weight_charge + delivery + packing + admin_fee) × (1 + tax))

  1. Base rate: flat ₹50 per booking
  2. Weight charge: ₹0.02 per gram
  3. Delivery type: STANDARD / EXPRESS / SAME_DAY surcharge
  4. Packing preference: BASIC / PREMIUM surcharge
  5. Admin fee: ₹50, officer-assisted bookings only
  6. Tax: 5% on the subtotal

All arithmetic is Decimal; rounding to whole rupees (half-up) happens once,
on the final total.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP


# ── Constants ──────────────────────────────────────────────

BASE_RATE = Decimal("50")
WEIGHT_RATE_PER_GRAM = Decimal("0.02")
ADMIN_FEE = Decimal("50")           # officer-assisted bookings
TAX_RATE = Decimal("0.05")          # 5%

DELIVERY_CHARGES = {
    "STANDARD": Decimal("30"),
    "EXPRESS": Decimal("80"),
    "SAME_DAY": Decimal("150"),
}

PACKING_CHARGES = {
    "BASIC": Decimal("10"),
    "PREMIUM": Decimal("20"),
}

DEFAULT_DELIVERY_TYPE = "STANDARD"
DEFAULT_PACKING_PREFERENCE = "BASIC"


# ── Data classes ───────────────────────────────────────────

@dataclass
class PriceBreakdown:
    weight_in_grams: int
    delivery_type: str
    packing_preference: str
    is_officer_booking: bool
    base_rate: Decimal
    weight_charge: Decimal
    delivery_charge: Decimal
    packing_charge: Decimal
    admin_fee: Decimal
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total_cost: Decimal


# ── Core Functions ─────────────────────────────────────────

def _key(value) -> str:
    """Accept enum members or plain strings."""
    return str(getattr(value, "value", value) or "").upper()


def delivery_charge(delivery_type) -> Decimal:
    """Surcharge for a delivery type; unknown types cost the same as STANDARD."""
    return DELIVERY_CHARGES.get(_key(delivery_type), DELIVERY_CHARGES[DEFAULT_DELIVERY_TYPE])


def packing_charge(packing_preference) -> Decimal:
    """Surcharge for a packing preference; unknown values cost the same as BASIC."""
    return PACKING_CHARGES.get(_key(packing_preference), PACKING_CHARGES[DEFAULT_PACKING_PREFERENCE])


def round_currency(amount: Decimal) -> Decimal:
    """Round to whole currency units, halves away from zero."""
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def calculate_price(
    weight_in_grams: int,
    delivery_type,
    packing_preference,
    is_officer_booking: bool = False,
) -> PriceBreakdown:
    """
    Calculate the itemised price for a booking.

    Args:
        weight_in_grams: Parcel weight, validated > 0 by the caller
        delivery_type: STANDARD, EXPRESS or SAME_DAY
        packing_preference: BASIC or PREMIUM
        is_officer_booking: True for bookings created by an officer (adds admin fee)

    Returns:
        PriceBreakdown whose total_cost is rounded to whole units
    """
    weight_charge = Decimal(weight_in_grams) * WEIGHT_RATE_PER_GRAM
    delivery = delivery_charge(delivery_type)
    packing = packing_charge(packing_preference)
    admin = ADMIN_FEE if is_officer_booking else Decimal("0")

    subtotal = BASE_RATE + weight_charge + delivery + packing + admin
    tax = subtotal * TAX_RATE
    total = round_currency(subtotal + tax)

    return PriceBreakdown(
        weight_in_grams=weight_in_grams,
        delivery_type=_key(delivery_type),
        packing_preference=_key(packing_preference),
        is_officer_booking=is_officer_booking,
        base_rate=BASE_RATE,
        weight_charge=weight_charge,
        delivery_charge=delivery,
        packing_charge=packing,
        admin_fee=admin,
        subtotal=subtotal,
        tax_rate=TAX_RATE,
        tax=tax,
        total_cost=total,
    )


def calculate_service_cost(
    weight_in_grams: int,
    delivery_type,
    packing_preference,
    is_officer_booking: bool = False,
) -> Decimal:
    """Total service cost for a booking (whole currency units)."""
    return calculate_price(
        weight_in_grams, delivery_type, packing_preference, is_officer_booking,
    ).total_cost
