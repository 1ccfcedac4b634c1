"""Deliveries API serializers.

Input serializers for creating requests, advancing driver status and shop
confirmation, plus read serializers for returning delivery records. Optional
numbers and basket items are normalized instead of rejected.
"""

from rest_framework import serializers

from deliveries import transitions
from deliveries.models import DeliveryRequest
from deliveries.normalization import normalize_items, normalize_number


class LenientNumberField(serializers.Field):
    """Any JSON value; non-finite or non-numeric input becomes None."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return normalize_number(data)

    def to_representation(self, value):
        return value


class BasketItemsField(serializers.Field):
    """Basket snapshot; every line is coerced to {id, name, qty, price}."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        return normalize_items(data)

    def to_representation(self, value):
        return value


class NeedByField(serializers.Field):
    """Deadline as an ISO datetime/date string or epoch milliseconds; parsed by the service."""

    default_error_messages = {"invalid": "Expected a datetime string or epoch milliseconds."}

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            self.fail("invalid")
        return data

    def to_representation(self, value):
        return value


class DeliveryCreateSerializer(serializers.Serializer):
    """Input serializer for a customer's delivery request.

    Required text fields are trimmed and must not be blank. `need_by_at` is
    parsed by the lifecycle service so that date-only values are accepted too.
    """

    item_description = serializers.CharField()
    contact_number = serializers.CharField(max_length=255)
    village = serializers.CharField(max_length=120)
    shop_name = serializers.CharField(max_length=200)
    shop_address = serializers.CharField(max_length=255)
    shop_id = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)

    estimated_distance_km = LenientNumberField()
    need_by_at = NeedByField()

    items = BasketItemsField()
    product_total = LenientNumberField()
    delivery_fee = LenientNumberField()
    grand_total = LenientNumberField()


class DeliveryOutputSerializer(serializers.ModelSerializer):
    """Read serializer for returning a complete delivery record."""

    class Meta:
        model = DeliveryRequest
        fields = [
            "id",
            "created_by",
            "item_description",
            "contact_number",
            "village",
            "shop_name",
            "shop_address",
            "shop_id",
            "items",
            "product_total",
            "delivery_fee",
            "grand_total",
            "estimated_distance_km",
            "price",
            "need_by_at",
            "delivery_status",
            "assigned_driver",
            "shop_confirmation_status",
            "shop_confirmation_at",
            "shop_note",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CustomerDeliverySerializer(DeliveryOutputSerializer):
    """Delivery record plus the assigned driver's contact details for the customer."""

    assigned_driver_info = serializers.SerializerMethodField()

    class Meta(DeliveryOutputSerializer.Meta):
        fields = DeliveryOutputSerializer.Meta.fields + ["assigned_driver_info"]
        read_only_fields = fields

    def get_assigned_driver_info(self, obj):
        driver = obj.assigned_driver
        if driver is None:
            return None
        prof = getattr(driver, "profile", None)
        return {
            "id": driver.id,
            "username": driver.username,
            "mobile": getattr(prof, "mobile", "") if prof else "",
        }


class StatusUpdateSerializer(serializers.Serializer):
    """Driver status update; only forward targets are accepted."""

    new_status = serializers.ChoiceField(choices=sorted(transitions.ADVANCE_TARGETS))


class ShopConfirmSerializer(serializers.Serializer):
    """Shop decision on an order. Notes longer than the limit are truncated, not rejected."""

    action = serializers.ChoiceField(choices=sorted(transitions.SHOP_ACTIONS))
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
