from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework.authtoken.models import Token

User = get_user_model()


class CreateAdminCommandTests(TestCase):
    def test_creates_staff_user_with_profile_and_token(self):
        out = StringIO()
        call_command("create_admin", name="Boss", phone="0911999999", password="pass12345", stdout=out)
        user = User.objects.get(username="+251911999999")
        self.assertTrue(user.is_staff)
        self.assertTrue(user.check_password("pass12345"))
        self.assertEqual(user.profile.phone, "+251911999999")
        self.assertTrue(Token.objects.filter(user=user).exists())
        self.assertIn("Admin ready.", out.getvalue())

    def test_rerun_resets_password(self):
        call_command("create_admin", name="Boss", phone="0911999999", password="first-pass", stdout=StringIO())
        call_command("create_admin", name="Chief", phone="+251911999999", password="second-pass", stdout=StringIO())
        user = User.objects.get(username="+251911999999")
        self.assertEqual(User.objects.count(), 1)
        self.assertTrue(user.check_password("second-pass"))
        self.assertEqual(user.profile.name, "Chief")

    def test_invalid_phone(self):
        with self.assertRaises(CommandError):
            call_command("create_admin", name="X", phone="123", password="pass12345", stdout=StringIO())
