"""Auth API serializers.

Provides serializers for user registration and login. Customers sign up and
log in with their phone number; the number is normalized before it is used
as the username, so `0911...` and `+251911...` are the same account.
"""

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from common.phone import is_valid_phone, normalize_phone
from profiles.models import Profile

User = get_user_model()


def _normalized_phone_or_error(value):
    phone = normalize_phone(value)
    if not is_valid_phone(phone):
        raise serializers.ValidationError("Invalid phone number.")
    return phone


class RegistrationSerializer(serializers.Serializer):
    """Validate and create a new user with its profile."""

    name = serializers.CharField(max_length=150)
    phone = serializers.CharField(max_length=30)
    password = serializers.CharField(write_only=True, min_length=8)
    block_number = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate_phone(self, value):
        phone = _normalized_phone_or_error(value)
        if Profile.objects.filter(phone=phone).exists() or User.objects.filter(username=phone).exists():
            raise serializers.ValidationError("Phone number already registered.")
        return phone

    def validate_password(self, value):
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated_data):
        phone = validated_data["phone"]
        user = User(username=phone, first_name=validated_data["name"])
        user.set_password(validated_data["password"])
        user.save()
        Profile.objects.create(
            user=user,
            name=validated_data["name"],
            phone=phone,
            block_number=validated_data.get("block_number", ""),
        )
        return user


class LoginSerializer(serializers.Serializer):
    """Authenticate phone/password and attach the user to validated data."""

    phone = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            username=normalize_phone(attrs.get("phone")),
            password=attrs.get("password"),
        )
        if not user:
            raise serializers.ValidationError({"detail": "Invalid phone or password."})
        attrs["user"] = user
        return attrs
