"""Orders API views.

Public endpoints place online orders and let customers track, edit or
cancel today's order by tracking code. Admin endpoints list and filter
orders, enter manual orders, change status, re-send SMS and delete.
Business rules live in `orders.services`; views only handle HTTP concerns.
"""

import datetime

from django.utils.dateparse import parse_date
from rest_framework import generics, status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from availability.clock import day_bounds
from availability.gate import check_service_available
from common.api.permissions import IsAdminStaff
from common.phone import normalize_phone
from orders import services
from orders.models import Order
from .serializers import (
    OrderCreateSerializer,
    OrderEditSerializer,
    OrderOutputSerializer,
    OrderStatusPatchSerializer,
    OrderTrackSerializer,
    ResendSmsSerializer,
)

ORDER_QUERYSET = Order.objects.all().prefetch_related("status_history", "notifications")


# ----------------------------- helpers (module-level) -----------------------------

def _parse_day(params, key) -> datetime.date:
    value = params.get(key)
    day = parse_date(value) if value else None
    if value and day is None:
        raise ValidationError({key: "Use YYYY-MM-DD."})
    return day


def _apply_filters(qs, params):
    """Filter by status, phone and service-zone date range; raises ValidationError on bad input."""
    v = params.get("status")
    if v:
        if v not in Order.Status.values:
            raise ValidationError({"status": f"Allowed values: {', '.join(Order.Status.values)}."})
        qs = qs.filter(status=v)

    v = params.get("phone")
    if v:
        qs = qs.filter(phone=normalize_phone(v))

    date_from = _parse_day(params, "date_from")
    if date_from:
        qs = qs.filter(created_at__gte=day_bounds(date_from)[0])

    date_to = _parse_day(params, "date_to")
    if date_to:
        qs = qs.filter(created_at__lt=day_bounds(date_to)[1])

    return qs


def _validate_patch_only_status(data: dict):
    """Allow only 'status' in PATCH; return a 400 response otherwise."""
    extra = set(data.keys()) - {"status"}
    if extra:
        return Response(
            {"detail": f"Only 'status' may be updated. Invalid fields: {', '.join(sorted(extra))}."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


def _created_response(order, message):
    data = OrderTrackSerializer(order).data
    data["id"] = order.id
    data["message"] = message
    return Response(data, status=status.HTTP_201_CREATED)


# --------------------------------------- views ---------------------------------------

class OrderListCreateAPIView(generics.ListCreateAPIView):
    """GET: list all orders (admin) with filters.
    POST: place an online order (guest or logged-in customer).
    """

    queryset = ORDER_QUERYSET
    serializer_class = OrderOutputSerializer

    def get_permissions(self):
        """Anyone may order; only admins may list."""
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAuthenticated(), IsAdminStaff()]

    # --- GET ---
    def get_queryset(self):
        return _apply_filters(super().get_queryset(), self.request.query_params)

    # --- POST ---
    def create(self, request, *args, **kwargs):
        """Gate on availability, validate, and create; SMS goes out after commit."""
        check_service_available()
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = services.create_order(
            customer=data,
            items=data["items"],
            source=Order.Source.ONLINE,
            user=request.user,
        )
        return _created_response(order, "Order placed successfully")


class ManualOrderCreateAPIView(APIView):
    """POST /api/orders/manual/: staff-entered order (phone orders).

    Not subject to the availability gate or duplicate detection.
    """

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = services.create_order(
            customer=data, items=data["items"], source=Order.Source.MANUAL
        )
        return _created_response(order, "Manual order created")


class MyOrdersAPIView(generics.ListAPIView):
    """GET /api/orders/mine/: orders owned by the authenticated user."""

    serializer_class = OrderTrackSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            Order.objects.filter(user=self.request.user)
            .prefetch_related("status_history")
            .order_by("-created_at", "-id")
        )


class OrderDetailAPIView(generics.RetrieveDestroyAPIView):
    """GET: full order (admin). DELETE: irreversible delete (admin)."""

    queryset = ORDER_QUERYSET
    serializer_class = OrderOutputSerializer
    permission_classes = [IsAuthenticated, IsAdminStaff]

    def destroy(self, request, *args, **kwargs):
        services.delete_order(kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderStatusAPIView(APIView):
    """PATCH /api/orders/<id>/status/: change status (admin); returns the full order."""

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def patch(self, request, pk: int):
        bad = _validate_patch_only_status(request.data)
        if bad is not None:
            return bad
        serializer = OrderStatusPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.update_status(pk, serializer.validated_data["status"])
        return Response(
            OrderOutputSerializer(ORDER_QUERYSET.get(pk=order.pk)).data,
            status=status.HTTP_200_OK,
        )


class ResendSmsAPIView(APIView):
    """POST /api/orders/resend-sms/ -> {"message", "status"} (admin)."""

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def post(self, request):
        serializer = ResendSmsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = services.resend_notification(
            serializer.validated_data["order_id"], serializer.validated_data["type"]
        )
        return Response({"message": "SMS resent", "status": record.outcome}, status=status.HTTP_200_OK)


class TrackOrderAPIView(APIView):
    """
    /api/orders/track/<code>/

    GET: public tracking for orders placed today.
    PATCH: customer edit (name, location, items) before the cutoff.
    DELETE: customer cancellation before the cutoff.

    Authentication: none. The tracking code is the credential.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, code: str):
        order = services.track_by_code(code)
        return Response(OrderTrackSerializer(order).data, status=status.HTTP_200_OK)

    def patch(self, request, code: str):
        serializer = OrderEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.edit_by_code(code, serializer.validated_data)
        return Response(OrderTrackSerializer(order).data, status=status.HTTP_200_OK)

    def delete(self, request, code: str):
        order = services.cancel_by_code(code)
        return Response(OrderTrackSerializer(order).data, status=status.HTTP_200_OK)
