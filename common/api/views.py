from django.db.models import Count, Sum
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from availability.clock import day_bounds, service_date
from orders.models import Order
from .permissions import IsAdminStaff


class AdminStatsAPIView(APIView):
    """
    GET /api/admin/stats/

    Returns today's figures (service time zone):
    - orders_today: number of orders placed today
    - income_today: sum of totals of today's orders, canceled ones excluded
    - orders_by_status: today's order count per status

    Authentication: token
    Permissions: admin staff only
    """

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def get(self, request):
        start, end = day_bounds(service_date())
        today = Order.objects.filter(created_at__gte=start, created_at__lt=end)

        income = (
            today.exclude(status=Order.Status.CANCELED).aggregate(total=Sum("total"))["total"]
            or 0
        )
        by_status = {s: 0 for s in Order.Status.values}
        for row in today.values("status").annotate(n=Count("id")):
            by_status[row["status"]] = row["n"]

        data = {
            "date": start.date().isoformat(),
            "orders_today": today.count(),
            "income_today": income,
            "orders_by_status": by_status,
        }
        return Response(data, status=status.HTTP_200_OK)
