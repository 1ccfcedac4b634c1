"""Delivery price (driver payout baseline).

Base fare plus a per-km rate, floored at a minimum fare. Requests without a
usable distance get a flat default. Distances are bounded by
MAX_DISTANCE_KM so every price fits the stored two-decimal amount.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

BASE_FARE = Decimal("2")
PER_KM_RATE = Decimal("0.6")
MINIMUM_FARE = Decimal("3.00")
DEFAULT_PRICE = Decimal("4.00")

MAX_DISTANCE_KM = 1000

CENT = Decimal("0.01")


def is_usable_distance(distance_km) -> bool:
    return (
        isinstance(distance_km, (int, float))
        and not isinstance(distance_km, bool)
        and math.isfinite(distance_km)
        and distance_km > 0
    )


def compute_price(distance_km) -> Decimal:
    """Return the delivery price for `distance_km`, rounded to cents.

    Only a finite, positive number counts as a distance; anything else
    (None, zero, negatives, NaN, strings) yields DEFAULT_PRICE. Distances
    beyond MAX_DISTANCE_KM are priced as MAX_DISTANCE_KM.
    """
    if not is_usable_distance(distance_km):
        return DEFAULT_PRICE
    distance = min(distance_km, MAX_DISTANCE_KM)
    raw = BASE_FARE + PER_KM_RATE * Decimal(str(distance))
    return max(MINIMUM_FARE, raw.quantize(CENT, rounding=ROUND_HALF_UP))
