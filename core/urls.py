"""Root URL configuration.

All API routes live under `/api/`; the Django admin is mounted at `/admin/`.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("user_auth_app.api.urls")),
    path("api/", include("shops.api.urls")),
    path("api/", include("deliveries.api.urls")),
]
