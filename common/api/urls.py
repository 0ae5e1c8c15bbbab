from django.urls import path
from .views import AdminStatsAPIView

urlpatterns = [
    path("stats/", AdminStatsAPIView.as_view(), name="admin-stats"),
]
