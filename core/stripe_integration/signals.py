"""
Stripe Webhook Signal Handlers (version-agnostic)
=================================================

This module processes verified Stripe events that dj-stripe has already
validated and stored. We do not talk to Stripe directly from signals.
Instead, we react to persisted `djstripe.models.Event` rows using Django's
`post_save` signal, which is stable across dj-stripe versions.

Handled event types:
- `checkout.session.completed`               → `checkout_session_completed`
- `checkout.session.async_payment_succeeded` → `checkout_session_completed`
- `checkout.session.expired`                 → `checkout_session_expired`

Both custom signals are sent with `session=<dict>` (the event's
`data.object`). Receivers live in the apps that own the booked resources.

Safety:
- Never re-raise from the signal handler (prevents webhook retry storms).
- Receivers are expected to be idempotent; Stripe may deliver an event twice
  and both `completed` and `async_payment_succeeded` can arrive for one session.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

from djstripe.models import Event

logger = logging.getLogger(__name__)

# Sent with keyword argument `session` (Stripe Checkout Session payload).
checkout_session_completed = Signal()
checkout_session_expired = Signal()

EVENT_SIGNALS = {
    "checkout.session.completed": checkout_session_completed,
    "checkout.session.async_payment_succeeded": checkout_session_completed,
    "checkout.session.expired": checkout_session_expired,
}


# ---------- helpers ----------


def _extract_data_object(event: Event) -> Dict[str, Any]:
    """
    Extract the Stripe event's `data.object` payload from a dj-stripe Event.

    dj-stripe stores the raw Stripe JSON in `event.data`. Depending on the
    dj-stripe version it is either the full event body or only its `data`
    member, so both shapes are accepted.

    Returns:
        A dict representing the `data.object` (or `{}` if not found).
    """
    data = event.data or {}
    if not isinstance(data, dict):
        logger.warning("Event %s carries non-dict data", event.id)
        return {}
    # Standard Stripe event shape: {"data": {"object": {...}}}
    if isinstance(data.get("data"), dict):
        obj = data["data"].get("object")
        if isinstance(obj, dict):
            return obj
    # Fallback: `object` is top-level
    if isinstance(data.get("object"), dict):
        return data["object"]
    return {}


def dispatch_stripe_event(event_type: str, obj: Dict[str, Any]) -> bool:
    """
    Re-emit a Stripe event as the matching Django signal.

    Returns:
        True when the event type is handled, False otherwise.
    """
    signal = EVENT_SIGNALS.get(event_type)
    if signal is None:
        # Not an error: we simply don't need to act on every event type.
        logger.debug("Unhandled event type: %s", event_type)
        return False

    logger.info(
        "%s session=%s metadata=%s",
        event_type,
        obj.get("id"),
        obj.get("metadata"),
    )
    signal.send(sender=Event, session=obj)
    return True


# ---------- signal entrypoint ----------


@receiver(post_save, sender=Event)
def on_djstripe_event_created(sender, instance: Event, created: bool, **kwargs):
    """
    Post-save hook for dj-stripe Event.

    Runs once for each *new* event saved by dj-stripe (after signature
    verification and de-dup). Never re-raises to avoid webhook retry storms.
    """
    if not created:
        return

    event_type = instance.type
    logger.info("[webhook] %s (event_id=%s)", event_type, instance.id)

    try:
        dispatch_stripe_event(event_type, _extract_data_object(instance))
    except Exception as exc:
        # Never re-raise: Stripe may retry. We just log.
        logger.exception("Error handling event %s: %s", event_type, exc)
