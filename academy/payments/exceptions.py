"""
Booking Exceptions

DRF API exceptions raised by the booking services and feature views.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class BookingNotFound(NotFound):
    default_detail = _("Booking not found.")
    default_code = "booking_not_found"


class BookingUnavailable(APIException):
    """The requested slot, course or event cannot be booked (anymore)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("This item is not available for booking.")
    default_code = "booking_unavailable"


class PaymentNotCompleted(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Payment not completed.")
    default_code = "payment_not_completed"


class UnknownBookingType(Exception):
    """Checkout metadata names a booking type nobody handles."""
