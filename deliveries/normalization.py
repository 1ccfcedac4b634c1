"""Input normalization for delivery requests.

Creation is permissive on optional numbers and the basket snapshot: values
that are missing or not finite numbers are turned into `None` (totals,
distance) or `0` (item quantity and price) instead of failing the request.
These helpers run before validation so the rules live in one place.
"""

import math

from .models import DeliveryRequest


def normalize_number(value):
    """Return `value` as a finite float, or None.

    Accepts ints, floats and numeric strings. Booleans, blanks, NaN,
    infinities and anything unparseable become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_distance(value):
    """Like normalize_number, but a negative distance is treated as unknown."""
    number = normalize_number(value)
    if number is None or number < 0:
        return None
    return number


def _number_or_zero(value):
    number = normalize_number(value)
    return 0 if number is None else number


def normalize_item(item) -> dict:
    """Coerce one basket line to {id, name, qty, price}."""
    if not isinstance(item, dict):
        item = {}
    return {
        "id": str(item.get("id") or ""),
        "name": str(item.get("name") or ""),
        "qty": _number_or_zero(item.get("qty")),
        "price": _number_or_zero(item.get("price")),
    }


def normalize_items(items) -> list:
    """Return a normalized copy of the basket; non-lists become an empty basket."""
    if not isinstance(items, (list, tuple)):
        return []
    return [normalize_item(item) for item in items]


def truncate_note(note) -> str:
    return str(note)[: DeliveryRequest.SHOP_NOTE_MAX_LENGTH]
