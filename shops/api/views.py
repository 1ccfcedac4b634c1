"""Shops API views.

Public, unauthenticated access to the static shop directory: a compact list
and a detail view including products.
"""

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from shops.directory import SHOPS, get_shop
from .serializers import ShopDetailSerializer, ShopListSerializer


class ShopListAPIView(APIView):
    """GET /api/shops/ -> [{id, name, address, products_count}]."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(ShopListSerializer(SHOPS, many=True).data, status=status.HTTP_200_OK)


class ShopDetailAPIView(APIView):
    """GET /api/shops/{shop_id}/ -> full shop or 404."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, shop_id: str):
        shop = get_shop(shop_id)
        if shop is None:
            return Response({"detail": "Shop not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(ShopDetailSerializer(shop).data, status=status.HTTP_200_OK)
