"""Availability API views.

GET is public so the ordering page can tell customers whether the service is
open. Writes are restricted to admin staff and go through the row-locked
singleton update.
"""

from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api.permissions import IsAdminStaff
from ..gate import is_service_available
from ..models import AvailabilityConfig
from .serializers import AvailabilityConfigSerializer


class AvailabilityAPIView(APIView):
    """GET/PUT/PATCH /api/availability/"""

    def get_permissions(self):
        """Public read; admin-only write."""
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated(), IsAdminStaff()]

    def get(self, request):
        config = AvailabilityConfig.current()
        decision = is_service_available(timezone.now(), config)
        return Response(
            {
                "config": AvailabilityConfigSerializer(config).data if config else None,
                "is_open": decision.allowed,
                "reason": decision.reason,
            },
            status=status.HTTP_200_OK,
        )

    def put(self, request):
        return self._save(request, partial=False)

    def patch(self, request):
        return self._save(request, partial=True)

    def _save(self, request, partial):
        current = AvailabilityConfig.current()
        serializer = AvailabilityConfigSerializer(current, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        config = AvailabilityConfig.save_settings(**serializer.validated_data)
        return Response(AvailabilityConfigSerializer(config).data, status=status.HTTP_200_OK)
