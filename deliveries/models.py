"""Deliveries app models.

Defines the DeliveryRequest model. A request is created by a customer against
a shop, confirmed or rejected by that shop, and claimed and fulfilled by a
driver. The basket snapshot (items and totals) is stored as supplied by the
client; only the delivery price is computed server-side.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .pricing import MAX_DISTANCE_KM


class DeliveryRequest(models.Model):
    """A delivery request tracked through shop confirmation and driver fulfilment."""

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        ASSIGNED = "Assigned", "Assigned"
        PICKED = "Picked", "Picked"
        DELIVERED = "Delivered", "Delivered"

    class ShopConfirmation(models.TextChoices):
        PENDING = "Pending", "Pending"
        ACCEPTED = "Accepted", "Accepted"
        REJECTED = "Rejected", "Rejected"

    SHOP_NOTE_MAX_LENGTH = 300

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="delivery_requests",
    )

    item_description = models.TextField()
    contact_number = models.CharField(max_length=255)
    village = models.CharField(max_length=120)

    shop_name = models.CharField(max_length=200)
    shop_address = models.CharField(max_length=255)
    shop_id = models.CharField(max_length=50, null=True, blank=True, db_index=True)

    items = models.JSONField(default=list, blank=True)
    product_total = models.FloatField(null=True, blank=True)
    delivery_fee = models.FloatField(null=True, blank=True)
    grand_total = models.FloatField(null=True, blank=True)

    estimated_distance_km = models.FloatField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(MAX_DISTANCE_KM)],
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("4.00"))
    need_by_at = models.DateTimeField(null=True, blank=True)

    assigned_driver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="assigned_deliveries",
        null=True,
        blank=True,
    )
    delivery_status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING
    )

    shop_confirmation_status = models.CharField(
        max_length=20, choices=ShopConfirmation.choices, default=ShopConfirmation.PENDING
    )
    shop_confirmation_at = models.DateTimeField(null=True, blank=True)
    shop_note = models.CharField(max_length=SHOP_NOTE_MAX_LENGTH, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["delivery_status", "assigned_driver"], name="delivery_status_driver_idx"),
            models.Index(fields=["shop_id", "shop_confirmation_status"], name="delivery_shop_confirm_idx"),
        ]

    def __str__(self) -> str:
        """Readable representation for admin and debugging."""
        return f"DeliveryRequest<{self.id} {self.village} {self.delivery_status}>"
