from django.urls import path
from .views import ShopListAPIView, ShopDetailAPIView

urlpatterns = [
    path("shops/", ShopListAPIView.as_view(), name="shop-list"),
    path("shops/<str:shop_id>/", ShopDetailAPIView.as_view(), name="shop-detail"),
]
