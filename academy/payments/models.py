"""
Academy Booking/Payment Base Model

Abstract model shared by every paid booking in the marketplace
(consultations, in-person courses, recorded courses). It holds the payment
columns and implements the booking state machine once:

    new stripe booking        → payment_status=pending, status=pending, expires_at set
    paid (verify or webhook)  → payment_status=paid,    status=confirmed, paid_at set
    expired / abandoned       → payment_status=failed,  status=cancelled

Transitions are idempotent. `mark_paid()` returns False when the booking was
already paid, so the `on_paid()` hook of concrete models runs exactly once.
Only pending bookings can expire.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

__all__ = ["PaidBooking", "PaidBookingQuerySet"]


class PaidBookingQuerySet(models.QuerySet):
    def paid(self):
        return self.filter(payment_status=PaidBooking.PaymentStatus.PAID)

    def pending(self):
        return self.filter(payment_status=PaidBooking.PaymentStatus.PENDING)

    def stale(self, now=None):
        """Pending stripe bookings whose checkout window has closed."""
        now = now or timezone.now()
        return self.pending().filter(
            payment_method=PaidBooking.PaymentMethod.STRIPE,
            expires_at__isnull=False,
            expires_at__lte=now,
        )


class PaidBooking(models.Model):
    """
    Abstract paid booking.

    Attributes:
        user: Booking owner
        payment_method: stripe, cash, internal or external
        payment_status: pending, paid or failed
        status: pending, confirmed or cancelled
        stripe_session_id: Checkout Session id (unique, only for stripe)
        expires_at: End of the checkout window of a pending stripe booking
        paid_at: When the payment was confirmed
    """

    class PaymentMethod(models.TextChoices):
        STRIPE = "stripe", _("Stripe")
        CASH = "cash", _("Cash")
        INTERNAL = "internal", _("Internal")
        EXTERNAL = "external", _("External")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
        verbose_name=_("User"),
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.STRIPE,
        verbose_name=_("Payment Method"),
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        db_index=True,
        verbose_name=_("Payment Status"),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        verbose_name=_("Status"),
    )
    stripe_session_id = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        verbose_name=_("Stripe Session ID"),
    )
    expires_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Expires At"))
    paid_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Paid At"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaidBookingQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    @property
    def is_paid(self) -> bool:
        return self.payment_status == self.PaymentStatus.PAID

    @property
    def is_pending(self) -> bool:
        return self.payment_status == self.PaymentStatus.PENDING

    def mark_paid(self, when=None) -> bool:
        """
        Move the booking to paid/confirmed.

        Returns:
            True if the booking changed, False if it was already paid.
        """
        if self.is_paid:
            return False
        self.payment_status = self.PaymentStatus.PAID
        self.status = self.Status.CONFIRMED
        self.paid_at = when or timezone.now()
        self.save(update_fields=["payment_status", "status", "paid_at", "updated_at"])
        self.on_paid()
        return True

    def mark_expired(self) -> bool:
        """
        Cancel a pending booking whose checkout was abandoned.

        Returns:
            True if the booking changed, False if it was not pending.
        """
        if not self.is_pending:
            return False
        self.payment_status = self.PaymentStatus.FAILED
        self.status = self.Status.CANCELLED
        self.save(update_fields=["payment_status", "status", "updated_at"])
        return True

    def on_paid(self) -> None:
        """Hook for side effects of a confirmed payment. Runs once."""
