from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from availability.models import AvailabilityConfig
from orders.models import Order
from .helpers import ORDER_PAYLOAD, create_user_with_token


@override_settings(NOTIFICATIONS_RUN_INLINE=True, SMS_PROVIDER="mock")
class OrderCreateTests(APITestCase):
    def setUp(self):
        self.url = reverse("order-list")
        self.cust, self.cust_token = create_user_with_token("+251911000010", "Cust")
        self.admin, self.admin_token = create_user_with_token("+251911000099", "Admin", is_staff=True)

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_guest_order_success_201(self):
        with self.captureOnCommitCallbacks(execute=True):
            res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total"], 400)
        self.assertEqual(res.data["status"], "pending")
        self.assertEqual(res.data["message"], "Order placed successfully")
        self.assertRegex(res.data["tracking_code"], r"^FD-\d{6}$")
        self.assertTrue(res.data["track_url"].endswith(f"/track/{res.data['tracking_code']}"))
        self.assertNotIn("phone", res.data)

        order = Order.objects.get(pk=res.data["id"])
        self.assertIsNone(order.user)
        self.assertEqual(order.source, Order.Source.ONLINE)
        self.assertEqual(order.phone, "+251911000001")
        self.assertEqual(order.status_history.count(), 1)
        self.assertEqual(order.notifications.filter(outcome="sent").count(), 1)

    def test_logged_in_order_is_linked_to_user(self):
        self.auth(self.cust_token)
        res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Order.objects.get(pk=res.data["id"]).user, self.cust)

    def test_client_price_is_ignored(self):
        payload = dict(ORDER_PAYLOAD, items=[{"variant": "special", "unit_price": 1, "quantity": 1}])
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(pk=res.data["id"])
        self.assertEqual(order.items[0]["unit_price"], 135)
        self.assertEqual(order.total, 135)

    def test_duplicate_409(self):
        self.assertEqual(self.client.post(self.url, ORDER_PAYLOAD, format="json").status_code, 201)
        res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Order.objects.count(), 1)

    def test_same_basket_other_phone_is_fine(self):
        self.client.post(self.url, ORDER_PAYLOAD, format="json")
        res = self.client.post(self.url, dict(ORDER_PAYLOAD, phone="0711000002"), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

    def test_invalid_payload_400(self):
        cases = [
            dict(ORDER_PAYLOAD, phone="12345"),
            dict(ORDER_PAYLOAD, items=[]),
            dict(ORDER_PAYLOAD, items=[{"variant": "deluxe"}]),
            dict(ORDER_PAYLOAD, items=[{"variant": "normal", "quantity": 0}]),
            {k: v for k, v in ORDER_PAYLOAD.items() if k != "location"},
        ]
        for payload in cases:
            res = self.client.post(self.url, payload, format="json")
            self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST, payload)
        self.assertEqual(Order.objects.count(), 0)

    def test_closed_service_403(self):
        AvailabilityConfig.save_settings(is_temporarily_closed=True, temp_close_reason="Holiday")
        res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["detail"], "Holiday")
        self.assertEqual(Order.objects.count(), 0)


@override_settings(SMS_PROVIDER="mock")
class ManualOrderTests(APITestCase):
    def setUp(self):
        self.url = reverse("order-manual")
        self.cust, self.cust_token = create_user_with_token("+251911000010", "Cust")
        self.admin, self.admin_token = create_user_with_token("+251911000099", "Admin", is_staff=True)

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def test_admin_manual_order_ignores_gate_and_duplicates(self):
        AvailabilityConfig.save_settings(is_temporarily_closed=True)
        self.auth(self.admin_token)
        for _ in range(2):
            res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
            self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Order.objects.filter(source=Order.Source.MANUAL).count(), 2)

    def test_customer_forbidden_403(self):
        self.auth(self.cust_token)
        res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_401(self):
        res = self.client.post(self.url, ORDER_PAYLOAD, format="json")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
