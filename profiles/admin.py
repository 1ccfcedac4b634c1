from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import Profile

User = get_user_model()


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Accounts by role. Drivers show their vehicle, shop accounts the directory id they act for.
    """
    list_display = ("user", "type", "mobile", "village", "role_detail", "created_at")
    list_select_related = ("user",)
    search_fields = ("user__username", "mobile", "village", "shop_id")
    list_filter = ("type", "village", "shop_id")
    ordering = ("type", "user__username")
    autocomplete_fields = ("user",)
    readonly_fields = ("created_at",)
    fieldsets = (
        (None, {"fields": ("user", "type", "created_at")}),
        ("Contact", {"fields": ("mobile", "village")}),
        ("Role data", {"fields": ("vehicle_type", "shop_id")}),
    )

    def role_detail(self, obj):
        if obj.type == Profile.Type.DRIVER:
            return obj.vehicle_type
        if obj.type == Profile.Type.SHOP:
            return obj.shop_id or "unbound"
        return ""
    role_detail.short_description = "vehicle / shop"


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    fk_name = "user"
    fields = ("type", "mobile", "village", "vehicle_type", "shop_id")


admin.site.unregister(User)


@admin.register(User)
class AccountAdmin(DjangoUserAdmin):
    inlines = (ProfileInline,)
    list_display = ("username", "email", "role", "is_active", "date_joined")
    list_select_related = ("profile",)
    list_filter = ("is_active", "profile__type")

    def role(self, obj):
        prof = getattr(obj, "profile", None)
        return prof.type if prof else "-"
    role.admin_order_field = "profile__type"
