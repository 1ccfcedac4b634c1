"""Delivery lifecycle operations.

Each function takes the acting `Actor` explicitly, checks the actor's role and
ownership, consults the transition tables and then writes. Driver acceptance
is a single conditional UPDATE evaluated by the database, so at most one
driver can ever win a claim. The other writes read the record, validate the
snapshot and save; they are restricted to the owning actor.

Errors are raised as DRF exceptions (ValidationError, PermissionDenied,
NotFound) or as the delivery-specific ones in `deliveries.exceptions`.
"""

import logging
from datetime import datetime
from datetime import timezone as dt_timezone

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from . import transitions
from .actors import Actor
from .exceptions import DeliveryConflict, TransitionNotAllowed
from .models import DeliveryRequest
from .normalization import normalize_distance, normalize_items, normalize_number, truncate_note
from .pricing import MAX_DISTANCE_KM, compute_price

logger = logging.getLogger(__name__)

Status = DeliveryRequest.Status
ShopConfirmation = DeliveryRequest.ShopConfirmation

REQUIRED_TEXT_FIELDS = (
    "item_description",
    "contact_number",
    "village",
    "shop_name",
    "shop_address",
)


# ----------------------------- helpers (module-level) -----------------------------

def _require_customer(actor: Actor, message: str):
    if not actor.is_customer:
        raise PermissionDenied(message)


def _require_driver(actor: Actor, message: str):
    if not actor.is_driver:
        raise PermissionDenied(message)


def _require_shop(actor: Actor):
    if not actor.is_shop:
        raise PermissionDenied("Only shop accounts linked to a shop can manage shop orders.")


def _get_delivery(delivery_id) -> DeliveryRequest:
    try:
        return DeliveryRequest.objects.get(pk=delivery_id)
    except DeliveryRequest.DoesNotExist:
        raise NotFound("Delivery not found.")


def _require_assignee(actor: Actor, delivery: DeliveryRequest):
    if delivery.assigned_driver_id is None or delivery.assigned_driver_id != actor.user_id:
        raise PermissionDenied("Not your assignment.")


def _parse_need_by(value):
    """Return an aware datetime for `value` or None.

    Accepts a datetime, an ISO datetime or date string, or a number of
    milliseconds since the Unix epoch.
    """
    if value is None or value == "":
        return None
    parsed = value if isinstance(value, datetime) else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=dt_timezone.utc)
        except (OverflowError, OSError, ValueError):
            parsed = None
    if parsed is None and isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
            if parsed is None:
                day = parse_date(value.strip())
                parsed = datetime(day.year, day.month, day.day) if day else None
        except ValueError:
            parsed = None
    if parsed is None:
        raise ValidationError({"need_by_at": "Invalid need_by_at datetime."})
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_default_timezone())
    return parsed


def _clean_required_text(data) -> dict:
    cleaned = {name: str(data.get(name) or "").strip() for name in REQUIRED_TEXT_FIELDS}
    missing = [name for name, value in cleaned.items() if not value]
    if missing:
        raise ValidationError({name: "This field is required." for name in missing})
    return cleaned


# ------------------------------------ creation ------------------------------------

def create_delivery(actor: Actor, data) -> DeliveryRequest:
    """Create a Pending/Pending request for a customer with a server-side price.

    `data` is a mapping of the request fields. Optional numbers and the basket
    are normalized first; required text fields are then checked.
    """
    _require_customer(actor, "Only customers can create requests.")

    distance = normalize_distance(data.get("estimated_distance_km"))
    if distance is not None and distance > MAX_DISTANCE_KM:
        raise ValidationError(
            {"estimated_distance_km": f"Distance must not exceed {MAX_DISTANCE_KM} km."}
        )
    items = normalize_items(data.get("items"))
    product_total = normalize_number(data.get("product_total"))
    delivery_fee = normalize_number(data.get("delivery_fee"))
    grand_total = normalize_number(data.get("grand_total"))

    text = _clean_required_text(data)
    need_by_at = _parse_need_by(data.get("need_by_at"))
    shop_id = str(data.get("shop_id") or "").strip() or None

    delivery = DeliveryRequest.objects.create(
        created_by_id=actor.user_id,
        shop_id=shop_id,
        items=items,
        product_total=product_total,
        delivery_fee=delivery_fee,
        grand_total=grand_total,
        estimated_distance_km=distance,
        price=compute_price(distance),
        need_by_at=need_by_at,
        delivery_status=Status.PENDING,
        shop_confirmation_status=ShopConfirmation.PENDING,
        **text,
    )
    logger.info(
        "Delivery %s created by user %s (shop=%s, price=%s)",
        delivery.pk, actor.user_id, shop_id, delivery.price,
    )
    return delivery


# ------------------------------------ listings ------------------------------------

def list_mine(actor: Actor):
    """Requests created by the customer, newest first, with the driver preloaded."""
    _require_customer(actor, "Only customers can list their requests.")
    return (
        DeliveryRequest.objects.filter(created_by_id=actor.user_id)
        .select_related("assigned_driver", "assigned_driver__profile")
        .order_by("-created_at", "-id")
    )


def list_available(actor: Actor):
    """Unclaimed requests, regardless of the shop's confirmation."""
    _require_driver(actor, "Only drivers can view available requests.")
    return DeliveryRequest.objects.filter(
        delivery_status=transitions.CLAIMABLE_STATUS
    ).order_by("-created_at", "-id")


def list_assigned(actor: Actor):
    """Jobs currently or previously claimed by the driver, most recently updated first."""
    _require_driver(actor, "Only drivers can view assigned jobs.")
    return DeliveryRequest.objects.filter(assigned_driver_id=actor.user_id).order_by(
        "-updated_at", "-id"
    )


def list_shop_orders(actor: Actor):
    """Requests addressed to the shop the actor is bound to, newest first."""
    _require_shop(actor)
    return DeliveryRequest.objects.filter(shop_id=actor.shop_id).order_by("-created_at", "-id")


# --------------------------------- driver actions ---------------------------------

def claim_delivery(actor: Actor, delivery_id) -> DeliveryRequest:
    """Atomically assign a Pending, unassigned request to the acting driver.

    The condition is part of the UPDATE statement, so two drivers racing for
    the same job cannot both succeed. A lost race, an already-taken job and a
    vanished record all raise DeliveryConflict.
    """
    _require_driver(actor, "Only drivers can accept requests.")

    updated = DeliveryRequest.objects.filter(
        pk=delivery_id,
        delivery_status=transitions.CLAIMABLE_STATUS,
        assigned_driver__isnull=True,
    ).update(
        delivery_status=Status.ASSIGNED,
        assigned_driver_id=actor.user_id,
        updated_at=timezone.now(),
    )
    if updated != 1:
        logger.info("Claim of delivery %s by driver %s lost", delivery_id, actor.user_id)
        raise DeliveryConflict()

    logger.info("Delivery %s claimed by driver %s", delivery_id, actor.user_id)
    return DeliveryRequest.objects.get(pk=delivery_id)


def advance_status(actor: Actor, delivery_id, new_status) -> DeliveryRequest:
    """Move an assigned job forward to Picked or Delivered."""
    _require_driver(actor, "Only drivers can update status.")
    if not isinstance(new_status, str) or new_status not in transitions.ADVANCE_TARGETS:
        raise ValidationError({"new_status": "Invalid status. Allowed: Picked, Delivered."})

    delivery = _get_delivery(delivery_id)
    _require_assignee(actor, delivery)

    current = delivery.delivery_status
    if not transitions.is_valid_transition(current, new_status):
        if transitions.is_backwards(current, new_status):
            raise TransitionNotAllowed("Cannot move status backwards.")
        raise TransitionNotAllowed(f"Cannot move status from {current} to {new_status}.")

    delivery.delivery_status = new_status
    delivery.save(update_fields=["delivery_status", "updated_at"])
    logger.info("Delivery %s moved %s -> %s by driver %s", delivery.pk, current, new_status, actor.user_id)
    return delivery


def unassign_delivery(actor: Actor, delivery_id) -> DeliveryRequest:
    """Release an Assigned job back to the pool; not possible once picked up."""
    _require_driver(actor, "Only drivers can unassign.")

    delivery = _get_delivery(delivery_id)
    _require_assignee(actor, delivery)

    if delivery.delivery_status != transitions.RELEASABLE_STATUS:
        raise TransitionNotAllowed("You can only unassign while status is Assigned.")

    delivery.assigned_driver = None
    delivery.delivery_status = Status.PENDING
    delivery.save(update_fields=["assigned_driver", "delivery_status", "updated_at"])
    logger.info("Delivery %s released by driver %s", delivery.pk, actor.user_id)
    return delivery


# -------------------------------- customer actions --------------------------------

def cancel_delivery(actor: Actor, delivery_id) -> None:
    """Delete the customer's own request while it is still Pending."""
    _require_customer(actor, "Only customers can cancel.")

    delivery = _get_delivery(delivery_id)
    if delivery.created_by_id != actor.user_id:
        raise PermissionDenied("Not your request.")
    if delivery.delivery_status != transitions.CANCELLABLE_STATUS:
        raise TransitionNotAllowed("Only Pending requests can be cancelled.")

    # a driver may have claimed it since the read above
    deleted, _ = DeliveryRequest.objects.filter(
        pk=delivery.pk, delivery_status=transitions.CANCELLABLE_STATUS
    ).delete()
    if not deleted:
        raise DeliveryConflict("This request has just been taken by a driver.")
    logger.info("Delivery %s cancelled by user %s", delivery.pk, actor.user_id)


# ---------------------------------- shop actions ----------------------------------

def confirm_shop_order(actor: Actor, delivery_id, action, note=None) -> DeliveryRequest:
    """Accept or reject an order on behalf of the shop it is addressed to.

    Rejection is terminal. The driver-facing status is not touched.
    """
    _require_shop(actor)
    if not isinstance(action, str) or action not in transitions.SHOP_ACTIONS:
        raise ValidationError({"action": "action must be 'accept' or 'reject'."})

    delivery = _get_delivery(delivery_id)
    if delivery.shop_id != actor.shop_id:
        raise PermissionDenied("This order does not belong to your shop.")

    target = transitions.SHOP_ACTIONS[action]
    current = delivery.shop_confirmation_status
    if not transitions.is_valid_confirmation(current, target):
        if transitions.is_final_confirmation(current):
            raise DeliveryConflict("Order already rejected by shop.")
        raise DeliveryConflict(f"Cannot change confirmation from {current} to {target}.")

    delivery.shop_confirmation_status = target
    delivery.shop_confirmation_at = timezone.now()
    fields = ["shop_confirmation_status", "shop_confirmation_at", "updated_at"]
    if note:
        delivery.shop_note = truncate_note(note)
        fields.append("shop_note")
    delivery.save(update_fields=fields)
    logger.info("Delivery %s %s by shop %s", delivery.pk, target.lower(), actor.shop_id)
    return delivery
