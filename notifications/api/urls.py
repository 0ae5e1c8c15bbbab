from django.urls import path
from .views import BroadcastAPIView, BroadcastDetailAPIView

urlpatterns = [
    path("broadcast/", BroadcastAPIView.as_view(), name="broadcast"),
    path("broadcast/<int:pk>/", BroadcastDetailAPIView.as_view(), name="broadcast-detail"),
]
