"""Auth API views.

Implements token-based registration, login and the "me" endpoint. Registration
also creates the Profile carrying the account's role and role-specific data.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from profiles.models import Profile
from .permissions import AllowAnyRegistration, AllowedAnyLogin
from .serializers import LoginSerializer, RegistrationSerializer, UserSummarySerializer

User = get_user_model()

logger = logging.getLogger(__name__)


def _token_payload(user, token) -> dict:
    data = dict(UserSummarySerializer(user).data)
    data["token"] = token.key
    return data


class RegistrationView(APIView):
    """POST /api/registration/ -> create user + profile (role), return auth token."""

    permission_classes = [AllowAnyRegistration]

    def post(self, request, *args, **kwargs):
        serializer = RegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            user = serializer.save()
            Profile.objects.get_or_create(user=user, defaults=serializer.profile_data())
            token, _ = Token.objects.get_or_create(user=user)

        logger.info("Registered %s account %s", user.profile.type, user.id)
        return Response(_token_payload(user, token), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """POST /api/login/ -> validate credentials and return auth token."""

    permission_classes = [AllowedAnyLogin]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        return Response(_token_payload(user, token), status=status.HTTP_200_OK)


class MeView(APIView):
    """GET /api/auth/me/ -> summary of the authenticated account."""

    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return Response(UserSummarySerializer(request.user).data, status=status.HTTP_200_OK)
