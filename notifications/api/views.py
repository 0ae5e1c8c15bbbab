"""Broadcast API views.

POST sends the first round synchronously and answers with its counts; the
second round is left to the retry sweep.
"""

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api.permissions import IsAdminStaff
from ..campaigns import broadcast
from ..models import BroadcastCampaign
from .serializers import BroadcastCampaignSerializer, BroadcastCreateSerializer


class BroadcastAPIView(APIView):
    """POST /api/admin/broadcast/ -> 202 with first-round summary."""

    permission_classes = [IsAuthenticated, IsAdminStaff]

    def post(self, request):
        serializer = BroadcastCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        summary = broadcast(serializer.validated_data["message"])
        return Response(summary, status=status.HTTP_202_ACCEPTED)


class BroadcastDetailAPIView(generics.RetrieveAPIView):
    """GET /api/admin/broadcast/<id>/ -> campaign with per-status recipient counts."""

    permission_classes = [IsAuthenticated, IsAdminStaff]
    queryset = BroadcastCampaign.objects.all()
    serializer_class = BroadcastCampaignSerializer
