"""Delivery lifecycle transition tables.

Single source of truth for which status changes are legal. Two independent
axes exist: the driver-facing `delivery_status` and the shop-facing
`shop_confirmation_status`. The services layer consults these tables before
every write; nothing else compares status strings.
"""

from typing import Dict, Optional, Set

from .models import DeliveryRequest

Status = DeliveryRequest.Status
ShopConfirmation = DeliveryRequest.ShopConfirmation

# key -> current status, value -> statuses it may move to
DELIVERY_TRANSITIONS: Dict[str, Set[str]] = {
    Status.PENDING: {
        Status.ASSIGNED,            # claim
    },
    Status.ASSIGNED: {
        Status.PENDING,             # unassign
        Status.PICKED,
        Status.DELIVERED,           # shortcut, picked and dropped in one go
    },
    Status.PICKED: {
        Status.PICKED,              # idempotent
        Status.DELIVERED,
    },
    Status.DELIVERED: {
        Status.DELIVERED,           # idempotent
    },
}

# Order of the driver-owned part of the lifecycle.
DRIVER_FLOW = (Status.ASSIGNED, Status.PICKED, Status.DELIVERED)

# Targets a driver may request through a status update.
ADVANCE_TARGETS: Set[str] = {Status.PICKED, Status.DELIVERED}

CLAIMABLE_STATUS = Status.PENDING
CANCELLABLE_STATUS = Status.PENDING
RELEASABLE_STATUS = Status.ASSIGNED

SHOP_TRANSITIONS: Dict[str, Set[str]] = {
    ShopConfirmation.PENDING: {ShopConfirmation.ACCEPTED, ShopConfirmation.REJECTED},
    ShopConfirmation.ACCEPTED: {ShopConfirmation.ACCEPTED, ShopConfirmation.REJECTED},
    # terminal
    ShopConfirmation.REJECTED: set(),
}

SHOP_ACTIONS: Dict[str, str] = {
    "accept": ShopConfirmation.ACCEPTED,
    "reject": ShopConfirmation.REJECTED,
}


def is_valid_transition(current: Optional[str], incoming: Optional[str]) -> bool:
    """Return True if `delivery_status` may move from `current` to `incoming`."""
    if not current or not incoming:
        return False
    return incoming in DELIVERY_TRANSITIONS.get(current, set())


def is_backwards(current: str, incoming: str) -> bool:
    """True if `incoming` sits before `current` in the driver flow."""
    if current not in DRIVER_FLOW or incoming not in DRIVER_FLOW:
        return False
    return DRIVER_FLOW.index(incoming) < DRIVER_FLOW.index(current)


def is_valid_confirmation(current: Optional[str], incoming: Optional[str]) -> bool:
    """Return True if `shop_confirmation_status` may move from `current` to `incoming`."""
    if not current or not incoming:
        return False
    return incoming in SHOP_TRANSITIONS.get(current, set())


def is_final_confirmation(status: Optional[str]) -> bool:
    """A confirmation status with no outgoing transitions."""
    if not status:
        return False
    return not SHOP_TRANSITIONS.get(status, set())
