from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile

User = get_user_model()

ORDER_PAYLOAD = {
    "customer_name": "Sara",
    "phone": "0911000001",
    "location": "Block 4",
    "items": [
        {"variant": "normal", "quantity": 1},
        {"variant": "special", "quantity": 2, "extra_ketchup": True},
    ],
}


def create_user_with_token(phone, name="User", is_staff=False):
    user = User.objects.create_user(username=phone, password="pass1234", is_staff=is_staff)
    Profile.objects.create(user=user, name=name, phone=phone)
    return user, Token.objects.create(user=user)
