from django.test import TestCase, override_settings
from rest_framework import status


class StripeConfigViewTests(TestCase):
    @override_settings(
        STRIPE_LIVE_MODE=False,
        STRIPE_TEST_PUBLISHABLE_KEY="pk_test_123",
        STRIPE_LIVE_PUBLISHABLE_KEY="pk_live_456",
        DEFAULT_CURRENCY="usd",
    )
    def test_returns_test_key(self):
        response = self.client.get("/api/payments/stripe/config/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.json(), {"publishableKey": "pk_test_123", "currency": "usd", "liveMode": False}
        )

    @override_settings(
        STRIPE_LIVE_MODE=True,
        STRIPE_TEST_PUBLISHABLE_KEY="pk_test_123",
        STRIPE_LIVE_PUBLISHABLE_KEY="pk_live_456",
    )
    def test_returns_live_key_in_live_mode(self):
        response = self.client.get("/api/payments/stripe/config/")

        self.assertEqual(response.json()["publishableKey"], "pk_live_456")
