"""
Academy Consultation Models

Models:
- Consultation: A bookable time slot (unique `scheduled_at`)
- ConsultationBooking: Payment record of a slot booking

A slot is `available` until a booking for it is confirmed. Stripe bookings
reserve nothing while pending; the slot is taken when the payment is
confirmed (`ConsultationBooking.on_paid`). If another user got the slot
first, the payment is kept and logged for manual follow-up.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from academy.payments.models import PaidBooking

__all__ = ["Consultation", "ConsultationBooking"]

logger = logging.getLogger(__name__)


class Consultation(models.Model):
    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        BOOKED = "booked", _("Booked")
        CONFIRMED = "confirmed", _("Confirmed")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        UNPAID = "unpaid", _("Unpaid")

    consultation_type = models.CharField(max_length=200, verbose_name=_("Consultation Type"))
    scheduled_at = models.DateTimeField(unique=True, verbose_name=_("Scheduled At"))
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        verbose_name=_("Price"),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        db_index=True,
        verbose_name=_("Status"),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="consultations",
        verbose_name=_("Booked By"),
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaidBooking.PaymentMethod.choices,
        blank=True,
        verbose_name=_("Payment Method"),
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        blank=True,
        verbose_name=_("Payment Status"),
    )
    booked_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Booked At"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scheduled_at"]
        verbose_name = _("Consultation")
        verbose_name_plural = _("Consultations")

    def __str__(self) -> str:
        return f"{self.consultation_type} ({self.scheduled_at:%Y-%m-%d %H:%M})"

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.AVAILABLE

    def reserve(self, user, payment_method: str, payment_status: str) -> None:
        self.user = user
        self.status = self.Status.BOOKED
        self.payment_method = payment_method
        self.payment_status = payment_status
        self.booked_at = timezone.now()
        self.save(
            update_fields=[
                "user", "status", "payment_method", "payment_status", "booked_at", "updated_at",
            ]
        )


class ConsultationBooking(PaidBooking):
    consultation = models.ForeignKey(
        Consultation,
        on_delete=models.CASCADE,
        related_name="bookings",
        verbose_name=_("Consultation"),
    )

    class Meta(PaidBooking.Meta):
        verbose_name = _("Consultation Booking")
        verbose_name_plural = _("Consultation Bookings")

    def __str__(self) -> str:
        return f"{self.user} → {self.consultation} ({self.payment_status})"

    @transaction.atomic
    def on_paid(self) -> None:
        """Take the slot for the paying user."""
        consultation = Consultation.objects.select_for_update().get(pk=self.consultation_id)
        if consultation.is_available:
            consultation.reserve(
                self.user,
                payment_method=self.payment_method,
                payment_status=Consultation.PaymentStatus.PAID,
            )
            logger.info("Consultation %s booked by user %s", consultation.pk, self.user_id)
        elif consultation.user_id == self.user_id:
            if consultation.payment_status != Consultation.PaymentStatus.PAID:
                consultation.payment_status = Consultation.PaymentStatus.PAID
                consultation.save(update_fields=["payment_status", "updated_at"])
        else:
            logger.warning(
                "Consultation %s already taken by user %s; booking %s of user %s was paid anyway",
                consultation.pk,
                consultation.user_id,
                self.pk,
                self.user_id,
            )
