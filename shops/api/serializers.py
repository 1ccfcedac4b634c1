"""Shops API serializers.

Read-only representations of the static shop directory.
"""

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.FloatField()


class ShopListSerializer(serializers.Serializer):
    """Compact shop row for the public list (product count instead of products)."""

    id = serializers.CharField()
    name = serializers.CharField()
    address = serializers.CharField()
    products_count = serializers.SerializerMethodField()

    def get_products_count(self, obj) -> int:
        return len(obj.get("products", []))


class ShopDetailSerializer(serializers.Serializer):
    """Full shop including its products."""

    id = serializers.CharField()
    name = serializers.CharField()
    address = serializers.CharField()
    products = ProductSerializer(many=True)
