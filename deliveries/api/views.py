"""Deliveries API views.

Thin HTTP adapters around `deliveries.services`: each view checks the role at
request level, builds the acting `Actor` from the authenticated user and hands
over to the lifecycle operation. Errors raised by the services (400/403/404/
409) pass through DRF's exception handling unchanged.
"""

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from deliveries import services
from deliveries.actors import Actor
from .permissions import IsCustomerUser, IsDriverUser, IsShopUser
from .serializers import (
    CustomerDeliverySerializer,
    DeliveryCreateSerializer,
    DeliveryOutputSerializer,
    ShopConfirmSerializer,
    StatusUpdateSerializer,
)


def _actor(request) -> Actor:
    return Actor.from_user(request.user)


# ------------------------------------ customer ------------------------------------

class DeliveryCreateAPIView(generics.CreateAPIView):
    """POST /api/deliveries/ -> create a delivery request (customer-only)."""

    permission_classes = [IsAuthenticated, IsCustomerUser]
    serializer_class = DeliveryCreateSerializer

    def create(self, request, *args, **kwargs):
        """Validate input, create the request and return the full record."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delivery = services.create_delivery(_actor(request), serializer.validated_data)
        return Response(DeliveryOutputSerializer(delivery).data, status=status.HTTP_201_CREATED)


class MyDeliveriesListAPIView(generics.ListAPIView):
    """GET /api/deliveries/mine/ -> the customer's own requests, newest first."""

    permission_classes = [IsAuthenticated, IsCustomerUser]
    serializer_class = CustomerDeliverySerializer

    def get_queryset(self):
        return services.list_mine(_actor(self.request))


class DeliveryCancelAPIView(APIView):
    """DELETE /api/deliveries/{pk}/ -> cancel (delete) an own Pending request."""

    permission_classes = [IsAuthenticated, IsCustomerUser]

    def delete(self, request, pk: int):
        services.cancel_delivery(_actor(request), pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ------------------------------------- driver -------------------------------------

class AvailableDeliveriesListAPIView(generics.ListAPIView):
    """GET /api/deliveries/available/ -> all Pending requests, newest first."""

    permission_classes = [IsAuthenticated, IsDriverUser]
    serializer_class = DeliveryOutputSerializer

    def get_queryset(self):
        return services.list_available(_actor(self.request))


class AssignedDeliveriesListAPIView(generics.ListAPIView):
    """GET /api/deliveries/assigned-to-me/ -> the driver's jobs, recently updated first."""

    permission_classes = [IsAuthenticated, IsDriverUser]
    serializer_class = DeliveryOutputSerializer

    def get_queryset(self):
        return services.list_assigned(_actor(self.request))


class DeliveryAcceptAPIView(APIView):
    """POST /api/deliveries/{pk}/accept/ -> claim the job; 409 if already taken."""

    permission_classes = [IsAuthenticated, IsDriverUser]

    def post(self, request, pk: int):
        delivery = services.claim_delivery(_actor(request), pk)
        return Response(DeliveryOutputSerializer(delivery).data, status=status.HTTP_200_OK)


class DeliveryStatusAPIView(APIView):
    """PATCH /api/deliveries/{pk}/status/ {"new_status": "Picked"|"Delivered"}."""

    permission_classes = [IsAuthenticated, IsDriverUser]

    def patch(self, request, pk: int):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delivery = services.advance_status(
            _actor(request), pk, serializer.validated_data["new_status"]
        )
        return Response(DeliveryOutputSerializer(delivery).data, status=status.HTTP_200_OK)


class DeliveryUnassignAPIView(APIView):
    """POST /api/deliveries/{pk}/unassign/ -> release an Assigned job back to Pending."""

    permission_classes = [IsAuthenticated, IsDriverUser]

    def post(self, request, pk: int):
        delivery = services.unassign_delivery(_actor(request), pk)
        return Response(DeliveryOutputSerializer(delivery).data, status=status.HTTP_200_OK)


# -------------------------------------- shop --------------------------------------

class ShopOrdersListAPIView(generics.ListAPIView):
    """GET /api/shops/my/orders/ -> orders addressed to the caller's shop, newest first."""

    permission_classes = [IsAuthenticated, IsShopUser]
    serializer_class = DeliveryOutputSerializer

    def get_queryset(self):
        return services.list_shop_orders(_actor(self.request))


class ShopOrderConfirmAPIView(APIView):
    """PATCH /api/shops/my/orders/{pk}/confirm/ {"action": "accept"|"reject", "note"?}.

    Rejection is final: any later confirm call answers 409.
    """

    permission_classes = [IsAuthenticated, IsShopUser]

    def patch(self, request, pk: int):
        serializer = ShopConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delivery = services.confirm_shop_order(
            _actor(request),
            pk,
            serializer.validated_data["action"],
            serializer.validated_data.get("note"),
        )
        return Response(DeliveryOutputSerializer(delivery).data, status=status.HTTP_200_OK)
