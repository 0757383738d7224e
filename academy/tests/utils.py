"""
Shared helpers for the academy tests.
"""

from contextlib import contextmanager
from unittest import mock

from django.contrib.auth.models import User
from django.core.cache import cache
from rest_framework.test import APITestCase

CREATE_SESSION = "core.stripe_integration.checkout.stripe.checkout.Session.create"
RETRIEVE_SESSION = "core.stripe_integration.checkout.stripe.checkout.Session.retrieve"

PASSWORD = "Sup3r-Secret-Pass!"


def make_user(email="student@example.com", password=PASSWORD, **extra):
    return User.objects.create_user(
        username=email, email=email, password=password, **extra
    )


def make_admin(email="admin@example.com", password=PASSWORD):
    return User.objects.create_superuser(username=email, email=email, password=password)


def checkout_session(session_id="cs_test_1", payment_status="unpaid", **metadata):
    """Minimal Checkout Session payload as returned by Stripe."""
    return {
        "id": session_id,
        "object": "checkout.session",
        "url": f"https://checkout.stripe.com/c/pay/{session_id}",
        "payment_status": payment_status,
        "metadata": {key: str(value) for key, value in metadata.items()},
    }


@contextmanager
def stripe_create(session_id="cs_test_1"):
    """Patch session creation; the mock echoes the metadata it was called with."""

    def _create(**params):
        return checkout_session(session_id, **params.get("metadata", {}))

    with mock.patch(CREATE_SESSION, side_effect=_create) as create:
        yield create


@contextmanager
def stripe_retrieve(session):
    with mock.patch(RETRIEVE_SESSION, return_value=session) as retrieve:
        yield retrieve


class AcademyAPITestCase(APITestCase):
    """Clears the throttle cache so request counts never leak between tests."""

    def setUp(self):
        super().setUp()
        cache.clear()
