from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("user_auth_app.api.urls")),
    path("api/availability/", include("availability.api.urls")),
    path("api/orders/", include("orders.api.urls")),
    path("api/admin/", include("common.api.urls")),
    path("api/admin/", include("notifications.api.urls")),
]
