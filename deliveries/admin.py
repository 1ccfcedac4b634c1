from django.contrib import admin
from django.utils.html import format_html
from .models import DeliveryRequest


STATUS_COLORS = {
    "Pending": "#9ca3af",
    "Assigned": "#0ea5e9",
    "Picked": "#f59e0b",
    "Delivered": "#22c55e",
}

CONFIRMATION_COLORS = {
    "Pending": "#9ca3af",
    "Accepted": "#22c55e",
    "Rejected": "#ef4444",
}


def _badge(color, text):
    return format_html(
        '<span style="display:inline-block;padding:2px 8px;border-radius:999px;'
        'font-size:12px;font-weight:600;color:#fff;background:{};">{}</span>',
        color,
        text,
    )


@admin.register(DeliveryRequest)
class DeliveryRequestAdmin(admin.ModelAdmin):
    """
    Delivery overview:
    - list: id, village, shop, both lifecycle badges, customer, driver, price
    - filters: delivery status, shop confirmation, shop, created
    - read-only: everything owned by an actor (status fields change through the API only)
    """
    list_display = (
        "id",
        "village",
        "shop_name",
        "status_badge",
        "confirmation_badge",
        "customer_username",
        "driver_username",
        "price",
        "created_at",
    )
    list_select_related = ("created_by", "assigned_driver")
    list_filter = ("delivery_status", "shop_confirmation_status", "shop_id", "created_at")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")
    search_fields = ("item_description", "village", "shop_name", "created_by__username", "assigned_driver__username")

    readonly_fields = (
        "created_by",
        "assigned_driver",
        "delivery_status",
        "shop_confirmation_status",
        "shop_confirmation_at",
        "price",
        "items",
        "product_total",
        "delivery_fee",
        "grand_total",
        "created_at",
        "updated_at",
    )

    def status_badge(self, obj):
        return _badge(STATUS_COLORS.get(obj.delivery_status, "#9ca3af"), obj.delivery_status)
    status_badge.short_description = "status"
    status_badge.admin_order_field = "delivery_status"

    def confirmation_badge(self, obj):
        return _badge(
            CONFIRMATION_COLORS.get(obj.shop_confirmation_status, "#9ca3af"),
            obj.shop_confirmation_status,
        )
    confirmation_badge.short_description = "shop"
    confirmation_badge.admin_order_field = "shop_confirmation_status"

    def customer_username(self, obj):
        return obj.created_by.username if obj.created_by_id else ""
    customer_username.short_description = "customer"

    def driver_username(self, obj):
        return obj.assigned_driver.username if obj.assigned_driver_id else ""
    driver_username.short_description = "driver"
