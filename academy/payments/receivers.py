"""
Academy Payment Receivers

Connects the booking services to the webhook signals re-emitted by
`core.stripe_integration.signals`. The sender side already guards against
exceptions; here expected failures are logged with context and swallowed
so one bad session never blocks other receivers.
"""

import logging

from django.dispatch import receiver

from core.stripe_integration.signals import (
    checkout_session_completed,
    checkout_session_expired,
)

from . import services
from .exceptions import BookingNotFound

logger = logging.getLogger(__name__)


@receiver(checkout_session_completed, dispatch_uid="academy_checkout_session_completed")
def on_checkout_session_completed(sender, session, **kwargs):
    try:
        services.confirm_paid_session(session)
    except BookingNotFound:
        logger.warning(
            "Webhook: no booking for paid session %s (metadata=%s)",
            session.get("id"),
            session.get("metadata"),
        )


@receiver(checkout_session_expired, dispatch_uid="academy_checkout_session_expired")
def on_checkout_session_expired(sender, session, **kwargs):
    services.expire_session(session)
