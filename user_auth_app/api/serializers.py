"""Auth API serializers.

Provides serializers for user registration, login and the "me" summary.
Registration enforces unique username/email, password validation and, for
shop accounts, a shop id that exists in the shop directory.
"""

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.validators import validate_email
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from profiles.models import Profile
from shops.directory import shop_exists

User = get_user_model()

PROFILE_FIELDS = ("type", "mobile", "village", "vehicle_type", "shop_id")


class RegistrationSerializer(serializers.Serializer):
    """Validate and create a new user; role data is stored on the profile by the view."""

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    repeated_password = serializers.CharField(write_only=True, min_length=6)
    type = serializers.ChoiceField(choices=Profile.Type.choices)
    mobile = serializers.CharField(max_length=30, required=False, allow_blank=True)
    village = serializers.CharField(max_length=120, required=False, allow_blank=True)
    vehicle_type = serializers.CharField(max_length=50, required=False, allow_blank=True)
    shop_id = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError(_("Username already taken."))
        return value

    def validate_email(self, value):
        validate_email(value)
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(_("Email already in use."))
        return value

    def validate_mobile(self, value):
        value = value.strip()
        if value and Profile.objects.filter(mobile=value).exists():
            raise serializers.ValidationError(_("Mobile already registered."))
        return value

    def validate(self, attrs):
        if attrs["password"] != attrs["repeated_password"]:
            raise serializers.ValidationError(
                {"repeated_password": _("Passwords do not match.")}
            )
        validate_password(attrs["password"])

        if attrs["type"] == Profile.Type.SHOP:
            shop_id = (attrs.get("shop_id") or "").strip()
            if not shop_id:
                raise serializers.ValidationError(
                    {"shop_id": _("shop_id is required for shop accounts.")}
                )
            if not shop_exists(shop_id):
                raise serializers.ValidationError(
                    {"shop_id": _("Invalid shop_id for shop account.")}
                )
            attrs["shop_id"] = shop_id
        else:
            # only shop accounts are bound to a shop
            attrs["shop_id"] = None
        return attrs

    def profile_data(self) -> dict:
        """Role-specific profile values; fields that do not apply to the role stay empty."""
        data = self.validated_data
        role = data["type"]
        return {
            "type": role,
            "mobile": data.get("mobile", ""),
            "village": data.get("village", "") if role == Profile.Type.CUSTOMER else "",
            "vehicle_type": data.get("vehicle_type", "") if role == Profile.Type.DRIVER else "",
            "shop_id": data.get("shop_id"),
        }

    def create(self, validated_data):
        # Profile fields and `repeated_password` are not user model fields.
        for name in PROFILE_FIELDS + ("repeated_password",):
            validated_data.pop(name, None)
        raw_password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(raw_password)
        user.save()
        return user


class LoginSerializer(serializers.Serializer):
    """Authenticate by username or mobile plus password and attach the user to validated data."""

    username = serializers.CharField(required=False)
    mobile = serializers.CharField(required=False)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        username = attrs.get("username")
        mobile = (attrs.get("mobile") or "").strip()
        if not username and not mobile:
            raise serializers.ValidationError({"username": _("Username or mobile is required.")})
        if not username:
            prof = Profile.objects.select_related("user").filter(mobile=mobile).first()
            username = prof.user.username if prof else None
        user = authenticate(
            username=username,
            password=attrs.get("password"),
        ) if username else None
        if not user:
            raise serializers.ValidationError({"detail": "Invalid Credentials"})
        attrs["user"] = user
        return attrs


class UserSummarySerializer(serializers.Serializer):
    """User plus role data, as returned by registration, login and /auth/me/."""

    user_id = serializers.IntegerField(source="id")
    username = serializers.CharField()
    email = serializers.EmailField()
    type = serializers.SerializerMethodField()
    mobile = serializers.SerializerMethodField()
    village = serializers.SerializerMethodField()
    vehicle_type = serializers.SerializerMethodField()
    shop_id = serializers.SerializerMethodField()

    def _profile_value(self, user, name, default=""):
        prof = getattr(user, "profile", None)
        value = getattr(prof, name, default) if prof else default
        return value or default

    def get_type(self, user):
        return self._profile_value(user, "type")

    def get_mobile(self, user):
        return self._profile_value(user, "mobile")

    def get_village(self, user):
        return self._profile_value(user, "village", None)

    def get_vehicle_type(self, user):
        return self._profile_value(user, "vehicle_type", None)

    def get_shop_id(self, user):
        return self._profile_value(user, "shop_id", None)
