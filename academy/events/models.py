"""
Academy Event Models

Models:
- Event: Paid event with a fixed number of seats
- EventRegistration: A user's paid seat (one per user and event)

Coffee meets require the participant to present a project, so their
registrations carry `project_name` and `project_link`.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

__all__ = ["Event", "EventRegistration"]


class Event(models.Model):
    class EventType(models.TextChoices):
        REGULAR = "regular", _("Regular")
        COFFEE_MEET = "coffee_meet", _("Coffee Meet")

    name = models.CharField(max_length=200, verbose_name=_("Name"))
    description = models.TextField(verbose_name=_("Description"))
    date = models.DateTimeField(verbose_name=_("Date"))
    location = models.CharField(max_length=255, verbose_name=_("Location"))
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("1"))],
        verbose_name=_("Price"),
    )
    type = models.CharField(
        max_length=20,
        choices=EventType.choices,
        default=EventType.REGULAR,
        verbose_name=_("Type"),
    )
    seats = models.PositiveIntegerField(validators=[MinValueValidator(1)], verbose_name=_("Seats"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date"]
        verbose_name = _("Event")
        verbose_name_plural = _("Events")

    def __str__(self) -> str:
        return f"{self.name} ({self.date:%Y-%m-%d})"

    @property
    def is_coffee_meet(self) -> bool:
        return self.type == self.EventType.COFFEE_MEET

    @property
    def seats_taken(self) -> int:
        return self.registrations.count()

    @property
    def seats_left(self) -> int:
        return max(self.seats - self.seats_taken, 0)


class EventRegistration(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="event_registrations",
        verbose_name=_("User"),
    )
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="registrations",
        verbose_name=_("Event"),
    )
    project_name = models.CharField(max_length=200, blank=True, verbose_name=_("Project Name"))
    project_link = models.URLField(max_length=500, blank=True, verbose_name=_("Project Link"))
    paid = models.BooleanField(default=False, verbose_name=_("Paid"))
    stripe_session_id = models.CharField(max_length=255, blank=True, verbose_name=_("Stripe Session ID"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = ("user", "event")
        verbose_name = _("Event Registration")
        verbose_name_plural = _("Event Registrations")

    def __str__(self) -> str:
        return f"{self.user} @ {self.event.name}"
