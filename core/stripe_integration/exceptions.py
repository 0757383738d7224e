"""
Stripe Integration Exceptions

API exceptions raised by the checkout wrapper. Being DRF `APIException`
subclasses, views can let them propagate and DRF renders them as
`{"detail": ...}` with the right status code.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class PaymentProviderError(APIException):
    """The payment provider rejected the request or could not be reached."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Payment provider request failed."
    default_code = "payment_provider_error"


class CheckoutSessionNotFound(APIException):
    """The referenced checkout session does not exist at the provider."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Checkout session not found."
    default_code = "checkout_session_not_found"
