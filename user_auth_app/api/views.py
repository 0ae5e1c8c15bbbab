"""Auth API views.

Implements token-based registration and login by phone number.
"""

from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import AllowAnyLogin, AllowAnyRegistration
from .serializers import LoginSerializer, RegistrationSerializer


def _user_payload(user, token):
    profile = getattr(user, "profile", None)
    return {
        "token": token.key,
        "user_id": user.id,
        "name": profile.name if profile else user.get_full_name() or user.username,
        "phone": profile.phone if profile else user.username,
        "block_number": profile.block_number if profile else "",
        "role": "admin" if user.is_staff else "user",
    }


class RegistrationView(APIView):
    """POST /api/auth/register/ -> create user and profile, return auth token."""

    authentication_classes = []
    permission_classes = [AllowAnyRegistration]

    def post(self, request, *args, **kwargs):
        serializer = RegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        return Response(_user_payload(user, token), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """POST /api/auth/login/ -> validate credentials and return auth token."""

    authentication_classes = []
    permission_classes = [AllowAnyLogin]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        return Response(_user_payload(user, token), status=status.HTTP_200_OK)
