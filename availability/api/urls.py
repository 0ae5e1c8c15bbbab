from django.urls import path
from .views import AvailabilityAPIView

urlpatterns = [
    path("", AvailabilityAPIView.as_view(), name="availability"),
]
