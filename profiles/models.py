"""Profiles app models.

Defines the Profile model that attaches a role (customer/driver/shop) and the
role-specific contact data to a user. String fields default to empty strings
to avoid nulls in API responses; `shop_id` stays null for non-shop accounts.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q


class Profile(models.Model):
    """
    Profile for a single user.

    The `type` is the actor role every delivery operation is checked against.
    Shop accounts are bound to one entry of the shop directory via `shop_id`.
    """

    class Type(models.TextChoices):
        CUSTOMER = "customer", "customer"
        DRIVER = "driver", "driver"
        SHOP = "shop", "shop"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    type = models.CharField(max_length=20, choices=Type.choices)
    mobile = models.CharField(max_length=30, blank=True, default="")
    village = models.CharField(max_length=120, blank=True, default="")
    vehicle_type = models.CharField(max_length=50, blank=True, default="")
    shop_id = models.CharField(max_length=50, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["type", "shop_id"], name="profile_type_shop_idx")]
        constraints = [
            # one account per mobile number; blank means not given
            models.UniqueConstraint(
                fields=["mobile"], condition=~Q(mobile=""), name="profile_unique_mobile"
            ),
        ]

    def __str__(self):
        """Readable representation for admin and debugging."""
        return f"Profile<{self.user_id}:{self.type}>"
