"""Deliveries API permissions.

Request-level role gates for the delivery endpoints. Ownership (creator,
assigned driver, matching shop) is checked by the lifecycle services against
the record itself.
"""

from rest_framework.permissions import BasePermission


def _profile(user):
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "profile", None)


def _profile_type(user) -> str:
    prof = _profile(user)
    return getattr(prof, "type", "") if prof else ""


class IsCustomerUser(BasePermission):
    """Allows access only to authenticated users with profile.type == 'customer'."""

    message = "Only customers can perform this action."

    def has_permission(self, request, view):
        return _profile_type(request.user) == "customer"


class IsDriverUser(BasePermission):
    """Allows access only to authenticated users with profile.type == 'driver'."""

    message = "Only drivers can perform this action."

    def has_permission(self, request, view):
        return _profile_type(request.user) == "driver"


class IsShopUser(BasePermission):
    """Allows access only to shop accounts that are linked to a shop id.

    A shop profile without a shop id cannot see or confirm any order.
    """

    message = "Only shop accounts linked to a shop can access this resource."

    def has_permission(self, request, view):
        prof = _profile(request.user)
        return bool(prof and prof.type == "shop" and prof.shop_id)
