from unittest import mock

from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from notifications.models import BroadcastCampaign
from orders.models import Order

User = get_user_model()


@override_settings(SMS_PROVIDER="mock", BROADCAST_IN_PROCESS_RETRY=False, BROADCAST_EXCLUDED_NUMBERS=[])
class BroadcastAPITests(APITestCase):
    def setUp(self):
        self.url = reverse("broadcast")
        self.admin = User.objects.create_user("admin", password="pass1234", is_staff=True)
        self.admin_token = Token.objects.create(user=self.admin)
        self.user = User.objects.create_user("user", password="pass1234")
        self.user_token = Token.objects.create(user=self.user)
        for i in range(3):
            Order.objects.create(
                tracking_code=f"FD-00000{i}", customer_name="C", phone=f"+25191100000{i}",
                location="L", items=[], total=0,
            )

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_admin_broadcast_202(self):
        self.auth(self.admin_token)
        res = self.client.post(self.url, {"message": "We are closed on Friday"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(res.data["total_numbers"], 3)
        self.assertEqual(res.data["sent_first_round"], 3)
        self.assertEqual(res.data["failed_first_round"], 0)
        self.assertFalse(res.data["retry_scheduled"])

        detail = self.client.get(reverse("broadcast-detail", kwargs={"pk": res.data["campaign_id"]}))
        self.assertEqual(detail.status_code, status.HTTP_200_OK)
        self.assertEqual(detail.data["recipients_by_status"], {"sent": 3})

    def test_empty_message_400(self):
        self.auth(self.admin_token)
        res = self.client.post(self.url, {"message": "   "}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(BroadcastCampaign.objects.exists())

    def test_customer_forbidden_403(self):
        self.auth(self.user_token)
        with mock.patch("notifications.api.views.broadcast") as send:
            res = self.client.post(self.url, {"message": "hi"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        send.assert_not_called()

    def test_unauthenticated_401(self):
        res = self.client.post(self.url, {"message": "hi"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
