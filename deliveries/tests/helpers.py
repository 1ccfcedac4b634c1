from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile
from deliveries.actors import Actor
from deliveries.models import DeliveryRequest

User = get_user_model()


def make_user(username, ptype, **profile):
    u = User.objects.create_user(username, f"{username}@ex.com", "pass1234")
    Profile.objects.create(user=u, type=ptype, **profile)
    tok = Token.objects.create(user=u)
    return u, tok


def actor_for(user):
    return Actor.from_user(User.objects.select_related("profile").get(pk=user.pk))


def make_delivery(customer, **overrides):
    data = {
        "item_description": "Rice 5kg, lentils",
        "contact_number": "9800000001",
        "village": "Rampur",
        "shop_name": "Village General Store",
        "shop_address": "Main Road 12, Rampur",
        "shop_id": "shop1",
    }
    data.update(overrides)
    return DeliveryRequest.objects.create(created_by=customer, **data)


def assign(delivery, driver, status=DeliveryRequest.Status.ASSIGNED):
    delivery.assigned_driver = driver
    delivery.delivery_status = status
    delivery.save(update_fields=["assigned_driver", "delivery_status"])
    return delivery
