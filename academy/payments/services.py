"""
Academy Booking Services

One implementation of the pay-then-confirm flow shared by every paid
offering. Feature views call into this module; the Stripe webhook receivers
call the same functions, so a booking reaches the same state whether the
client polls the verify endpoint or Stripe notifies us first.

Flow:
1. `start_checkout(...)` creates a hosted Checkout Session and the pending
   booking that references it (`stripe_session_id`).
2. `confirm_paid_session(session)` marks the booking paid. It dispatches on
   `metadata.booking_type` and locks the booking row, so concurrent
   confirmations from the verify endpoint and the webhook only apply once.
3. `expire_session(session)` / `expire_stale_bookings()` cancel pending
   bookings whose checkout window closed without payment.

Events do not keep a pending row: the registration is created from the paid
session by `register_event_participant(session)`.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Tuple, Type
from urllib.parse import urlencode

from django.apps import apps
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from core.stripe_integration.checkout import (
    SESSION_ID_PLACEHOLDER,
    create_checkout_session,
    is_session_paid,
    retrieve_checkout_session,
    session_metadata,
)

from .exceptions import BookingNotFound, UnknownBookingType

logger = logging.getLogger(__name__)
User = get_user_model()

APP_LABEL = "academy"

CONSULTATION = "consultation"
IN_PERSON_COURSE = "in_person_course"
RECORDED_COURSE = "recorded_course"
EVENT = "event"

# booking_type → concrete PaidBooking model
BOOKING_MODELS = {
    CONSULTATION: "ConsultationBooking",
    IN_PERSON_COURSE: "InPersonCourseBooking",
    RECORDED_COURSE: "RecordedCourseBooking",
}


# ---------- helpers ----------


def get_booking_model(booking_type: str) -> Type:
    """
    Resolve the booking model for a checkout `booking_type`.

    Raises:
        UnknownBookingType: if no model handles this type.
    """
    model_name = BOOKING_MODELS.get(booking_type)
    if model_name is None:
        raise UnknownBookingType(booking_type)
    return apps.get_model(APP_LABEL, model_name)


def to_minor_units(amount) -> int:
    """Convert a decimal price into integer cents."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def frontend_url(path: str, include_session: bool = False, **params: Any) -> str:
    """
    Build an absolute frontend URL with query parameters.

    With `include_session=True` Stripe's `{CHECKOUT_SESSION_ID}` placeholder is
    appended unescaped so Stripe can substitute it on redirect.
    """
    url = f"{settings.FRONTEND_URL.rstrip('/')}/{path.lstrip('/')}"
    query = urlencode({key: value for key, value in params.items() if value is not None})
    parts = []
    if include_session:
        parts.append(f"session_id={SESSION_ID_PLACEHOLDER}")
    if query:
        parts.append(query)
    if parts:
        url = f"{url}?{'&'.join(parts)}"
    return url


def checkout_expiry(now=None):
    now = now or timezone.now()
    return now + timedelta(minutes=settings.CHECKOUT_SESSION_TTL_MINUTES)


# ---------- checkout ----------


def create_checkout(
    *,
    user,
    booking_type: str,
    name: str,
    price,
    success_path: str,
    cancel_path: str,
    description: str = "",
    metadata: Optional[Dict[str, Any]] = None,
    url_params: Optional[Dict[str, Any]] = None,
    expires_at=None,
):
    """
    Create a Checkout Session for `user` without persisting a booking.

    `metadata` is merged with `booking_type` and `user_id`; `url_params` are
    appended to both redirect URLs.
    """
    url_params = url_params or {}
    full_metadata = {"booking_type": booking_type, "user_id": user.pk}
    full_metadata.update(metadata or {})

    return create_checkout_session(
        name=name,
        description=description,
        unit_amount=to_minor_units(price),
        success_url=frontend_url(success_path, include_session=True, **url_params),
        cancel_url=frontend_url(cancel_path, **url_params),
        metadata=full_metadata,
        customer_email=user.email or None,
        expires_at=expires_at or checkout_expiry(),
    )


def start_checkout(*, booking_type: str, booking_fields: Dict[str, Any], **checkout_kwargs):
    """
    Create a Checkout Session and the pending booking that references it.

    Args:
        booking_type: One of the `BOOKING_MODELS` keys.
        booking_fields: Extra model fields of the concrete booking
            (e.g. `consultation=...`). Must not contain `user`.
        **checkout_kwargs: Forwarded to `create_checkout`.

    Returns:
        (booking, session)
    """
    model = get_booking_model(booking_type)
    user = checkout_kwargs["user"]
    expires_at = checkout_expiry()

    session = create_checkout(booking_type=booking_type, expires_at=expires_at, **checkout_kwargs)

    booking = model.objects.create(
        user=user,
        payment_method=model.PaymentMethod.STRIPE,
        stripe_session_id=session["id"],
        expires_at=expires_at,
        **booking_fields,
    )
    logger.info(
        "Created pending %s booking %s for user %s (session=%s)",
        booking_type,
        booking.pk,
        user.pk,
        session["id"],
    )
    return booking, session


def retrieve_session_for_user(session_id: str, user, booking_type: str):
    """
    Retrieve a Checkout Session and make sure it belongs to `user`.

    Raises:
        BookingNotFound: the session was created for another user or another
            kind of booking.
    """
    session = retrieve_checkout_session(session_id)
    metadata = session_metadata(session)
    if metadata.get("booking_type") != booking_type or str(metadata.get("user_id")) != str(user.pk):
        logger.warning(
            "Session %s does not match user %s / booking type %s (metadata=%s)",
            session_id,
            user.pk,
            booking_type,
            metadata,
        )
        raise BookingNotFound()
    return session


# ---------- confirmation ----------


def confirm_paid_session(session) -> Tuple[Optional[Any], bool]:
    """
    Apply a paid Checkout Session to its booking.

    Dispatches on `metadata.booking_type`. Sessions that are not paid, or whose
    booking type is unknown, are ignored.

    Returns:
        (booking_or_registration, changed). `changed` is False when the
        booking was already confirmed before this call.

    Raises:
        BookingNotFound: no booking references this session.
    """
    session_id = session.get("id")
    if not is_session_paid(session):
        logger.info("Session %s not paid yet (status=%s)", session_id, session.get("payment_status"))
        return None, False

    booking_type = session_metadata(session).get("booking_type")
    if booking_type == EVENT:
        return register_event_participant(session)

    try:
        model = get_booking_model(booking_type)
    except UnknownBookingType:
        logger.warning("Session %s has unknown booking_type %r", session_id, booking_type)
        return None, False

    with transaction.atomic():
        booking = model.objects.select_for_update().filter(stripe_session_id=session_id).first()
        if booking is None:
            logger.error("No %s booking found for paid session %s", booking_type, session_id)
            raise BookingNotFound()
        changed = booking.mark_paid()

    if changed:
        logger.info("Confirmed %s booking %s (session=%s)", booking_type, booking.pk, session_id)
    else:
        logger.info("%s booking %s already confirmed (session=%s)", booking_type, booking.pk, session_id)
    return booking, changed


def register_event_participant(session) -> Tuple[Optional[Any], bool]:
    """
    Idempotently create the event registration described by a paid session.

    Returns:
        (registration, created)
    """
    Event = apps.get_model(APP_LABEL, "Event")
    EventRegistration = apps.get_model(APP_LABEL, "EventRegistration")

    metadata = session_metadata(session)
    session_id = session.get("id")
    event_id = metadata.get("event_id")
    user_id = metadata.get("user_id")

    if not event_id or not user_id:
        logger.warning("Missing event_id or user_id in metadata of session %s. Skipping.", session_id)
        return None, False

    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        logger.error("Event registration for session %s: user %s not found.", session_id, user_id)
        raise BookingNotFound()

    with transaction.atomic():
        # Concurrent confirmations for the same event are serialized on the event row.
        try:
            event = Event.objects.select_for_update().get(pk=event_id)
        except Event.DoesNotExist:
            logger.error("Event registration for session %s: event %s not found.", session_id, event_id)
            raise BookingNotFound()

        already_registered = EventRegistration.objects.filter(user=user, event=event).exists()
        if not already_registered and event.seats_taken >= event.seats:
            # Payment is captured; keep the seat and flag the overbooking.
            logger.warning(
                "Event %s is full (%s seats) but session %s was paid by user %s. Registering anyway.",
                event.pk,
                event.seats,
                session_id,
                user.pk,
            )

        registration, created = EventRegistration.objects.select_for_update().get_or_create(
            user=user,
            event=event,
            defaults={
                "project_name": metadata.get("project_name", ""),
                "project_link": metadata.get("project_link", ""),
                "paid": True,
                "stripe_session_id": session_id,
            },
        )
        if not created and not registration.paid:
            registration.paid = True
            registration.stripe_session_id = session_id
            registration.save(update_fields=["paid", "stripe_session_id"])

    if created:
        logger.info("Registered user %s for event %s (session=%s)", user.pk, event.pk, session_id)
    else:
        logger.info("Registration for user %s and event %s already exists.", user.pk, event.pk)
    return registration, created


# ---------- expiry ----------


def expire_session(session) -> int:
    """
    Cancel the pending booking of an expired Checkout Session.

    Returns:
        Number of bookings cancelled (0 or 1).
    """
    session_id = session.get("id")
    booking_type = session_metadata(session).get("booking_type")
    if booking_type == EVENT:
        # nothing persisted before payment
        return 0

    try:
        model = get_booking_model(booking_type)
    except UnknownBookingType:
        logger.warning("Expired session %s has unknown booking_type %r", session_id, booking_type)
        return 0

    with transaction.atomic():
        booking = model.objects.select_for_update().filter(stripe_session_id=session_id).first()
        if booking is None or not booking.mark_expired():
            return 0

    logger.info("Cancelled %s booking %s after session %s expired", booking_type, booking.pk, session_id)
    return 1


def expire_stale_bookings(now=None, booking_types=None) -> Dict[str, int]:
    """
    Cancel pending stripe bookings whose checkout window has passed.

    Args:
        now: Reference time (defaults to `timezone.now()`).
        booking_types: Restrict the cleanup to these booking types.

    Returns:
        Mapping booking_type → number of bookings cancelled.
    """
    now = now or timezone.now()
    results: Dict[str, int] = {}
    for booking_type in booking_types or BOOKING_MODELS:
        model = get_booking_model(booking_type)
        count = model.objects.stale(now).update(
            payment_status=model.PaymentStatus.FAILED,
            status=model.Status.CANCELLED,
            updated_at=now,
        )
        results[booking_type] = count
        if count:
            logger.info("Cancelled %s stale %s booking(s)", count, booking_type)
    return results
