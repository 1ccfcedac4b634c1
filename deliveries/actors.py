"""Authenticated actor context.

Every lifecycle operation receives an explicit Actor describing who is acting:
the user id, the role taken from the user's profile and, for shop accounts,
the shop the account is bound to.
"""

from dataclasses import dataclass
from typing import Optional

from profiles.models import Profile

CUSTOMER = Profile.Type.CUSTOMER
DRIVER = Profile.Type.DRIVER
SHOP = Profile.Type.SHOP


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: str
    shop_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Actor":
        """Build the actor for an authenticated user (role "" if it has no profile)."""
        profile = getattr(user, "profile", None)
        role = getattr(profile, "type", "") if profile else ""
        shop_id = getattr(profile, "shop_id", None) if profile else None
        return cls(user_id=user.id, role=role, shop_id=shop_id or None)

    @property
    def is_customer(self) -> bool:
        return self.role == CUSTOMER

    @property
    def is_driver(self) -> bool:
        return self.role == DRIVER

    @property
    def is_shop(self) -> bool:
        return self.role == SHOP and bool(self.shop_id)
