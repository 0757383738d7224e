"""
Stripe Integration Views (core.stripe_integration)
==================================================

Endpoints
---------

1. GetStripeConfigView
   - URL: /api/payments/stripe/config/
   - Method: GET
   - Auth: None
   - Purpose:
       Returns the publishable key of the active mode (test or live) so the
       frontend can initialize Stripe.js safely.

Checkout sessions themselves are created by the feature endpoints
(consultations, courses, events) through `core.stripe_integration.checkout`.
The webhook receiver is provided by dj-stripe under `/stripe/`.
"""

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class GetStripeConfigView(APIView):
    """
    endpoint so the frontend can initialize Stripe.js
    """

    permission_classes = [AllowAny]

    def get(self, request):
        publishable_key = (
            settings.STRIPE_LIVE_PUBLISHABLE_KEY
            if settings.STRIPE_LIVE_MODE
            else settings.STRIPE_TEST_PUBLISHABLE_KEY
        )
        return Response(
            {
                "publishableKey": publishable_key,
                "currency": settings.DEFAULT_CURRENCY,
                "liveMode": settings.STRIPE_LIVE_MODE,
            },
            status=status.HTTP_200_OK,
        )
