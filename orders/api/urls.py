from django.urls import path
from .views import (
    ManualOrderCreateAPIView,
    MyOrdersAPIView,
    OrderDetailAPIView,
    OrderListCreateAPIView,
    OrderStatusAPIView,
    ResendSmsAPIView,
    TrackOrderAPIView,
)

urlpatterns = [
    path("", OrderListCreateAPIView.as_view(), name="order-list"),
    path("manual/", ManualOrderCreateAPIView.as_view(), name="order-manual"),
    path("mine/", MyOrdersAPIView.as_view(), name="order-mine"),
    path("resend-sms/", ResendSmsAPIView.as_view(), name="order-resend-sms"),
    path("track/<str:code>/", TrackOrderAPIView.as_view(), name="order-track"),
    path("<int:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("<int:pk>/status/", OrderStatusAPIView.as_view(), name="order-status"),
]
