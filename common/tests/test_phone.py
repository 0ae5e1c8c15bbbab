from django.test import SimpleTestCase

from common.phone import is_valid_phone, normalize_phone


class PhoneTests(SimpleTestCase):
    def test_local_formats_are_normalized(self):
        self.assertEqual(normalize_phone("0911223344"), "+251911223344")
        self.assertEqual(normalize_phone("0711223344"), "+251711223344")
        self.assertEqual(normalize_phone("911223344"), "+251911223344")
        self.assertEqual(normalize_phone("091 122-3344"), "+251911223344")

    def test_international_kept(self):
        self.assertEqual(normalize_phone("+251911223344"), "+251911223344")
        self.assertEqual(normalize_phone("251911223344"), "+251911223344")

    def test_empty(self):
        self.assertIsNone(normalize_phone(None))
        self.assertIsNone(normalize_phone("   "))

    def test_validity(self):
        self.assertTrue(is_valid_phone("0911223344"))
        self.assertTrue(is_valid_phone("+251711223344"))
        self.assertFalse(is_valid_phone("+251811223344"))
        self.assertFalse(is_valid_phone("09112233"))
        self.assertFalse(is_valid_phone(None))
