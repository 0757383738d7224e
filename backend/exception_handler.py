"""
API Exception Handler

Wraps DRF's default handler. Everything DRF already knows (validation errors,
APIException subclasses, Http404, PermissionDenied) keeps its usual response.
Stripe SDK errors that escape a view are logged and answered with 502 so a
provider outage never surfaces as an HTML 500 page.
"""

import logging

import stripe
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, stripe.StripeError):
        view = context.get("view")
        logger.exception(
            "Unhandled Stripe error in %s: %s",
            view.__class__.__name__ if view else "unknown view",
            exc,
        )
        return Response(
            {"detail": "Payment provider request failed."},
            status=status.HTTP_502_BAD_GATEWAY,
        )

    return None
