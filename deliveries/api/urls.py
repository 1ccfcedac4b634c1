from django.urls import path
from .views import (
    AssignedDeliveriesListAPIView,
    AvailableDeliveriesListAPIView,
    DeliveryAcceptAPIView,
    DeliveryCancelAPIView,
    DeliveryCreateAPIView,
    DeliveryStatusAPIView,
    DeliveryUnassignAPIView,
    MyDeliveriesListAPIView,
    ShopOrderConfirmAPIView,
    ShopOrdersListAPIView,
)

urlpatterns = [
    path("deliveries/", DeliveryCreateAPIView.as_view(), name="delivery-create"),
    path("deliveries/mine/", MyDeliveriesListAPIView.as_view(), name="delivery-mine"),
    path("deliveries/available/", AvailableDeliveriesListAPIView.as_view(), name="delivery-available"),
    path("deliveries/assigned-to-me/", AssignedDeliveriesListAPIView.as_view(), name="delivery-assigned"),
    path("deliveries/<int:pk>/", DeliveryCancelAPIView.as_view(), name="delivery-detail"),
    path("deliveries/<int:pk>/accept/", DeliveryAcceptAPIView.as_view(), name="delivery-accept"),
    path("deliveries/<int:pk>/status/", DeliveryStatusAPIView.as_view(), name="delivery-status"),
    path("deliveries/<int:pk>/unassign/", DeliveryUnassignAPIView.as_view(), name="delivery-unassign"),
    path("shops/my/orders/", ShopOrdersListAPIView.as_view(), name="shop-orders"),
    path("shops/my/orders/<int:pk>/confirm/", ShopOrderConfirmAPIView.as_view(), name="shop-order-confirm"),
]
