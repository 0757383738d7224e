"""
Stripe Checkout Wrapper (core.stripe_integration)
=================================================

Small functions around hosted Checkout Sessions. They are the only place in
the project that calls `stripe.checkout.Session` directly.

- `create_checkout_session(...)`   → one-off payment session with a single
                                     inline-priced line item.
- `retrieve_checkout_session(id)`  → fetch a session to read its
                                     `payment_status` and `metadata`.

Errors
------
- `stripe.InvalidRequestError` on retrieve → `CheckoutSessionNotFound` (404)
- any other `stripe.StripeError`           → `PaymentProviderError` (502)

Amounts are integers in the currency's minor unit (cents). Metadata values
are stringified because Stripe only stores strings.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

from .exceptions import CheckoutSessionNotFound, PaymentProviderError

stripe.api_key = settings.STRIPE_SECRET_KEY

logger = logging.getLogger(__name__)

SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def create_checkout_session(
    *,
    name: str,
    unit_amount: int,
    success_url: str,
    cancel_url: str,
    metadata: Dict[str, Any],
    description: str = "",
    currency: Optional[str] = None,
    customer_email: Optional[str] = None,
    expires_at: Optional[datetime] = None,
):
    """
    Create a hosted Checkout Session in `payment` mode.

    Args:
        name: Product name shown on the Stripe page.
        unit_amount: Price in minor units (e.g. cents).
        success_url: Redirect after payment. May contain `{CHECKOUT_SESSION_ID}`.
        cancel_url: Redirect when the customer aborts.
        metadata: Correlation data echoed back in webhooks and on retrieve.
        description: Optional product description (omitted when empty).
        currency: ISO currency code, defaults to `DEFAULT_CURRENCY`.
        customer_email: Prefills the email field.
        expires_at: When the session stops accepting payment.

    Returns:
        The Stripe Checkout Session object.

    Raises:
        PaymentProviderError: if Stripe rejects the request.
    """
    product_data: Dict[str, Any] = {"name": name}
    if description:
        product_data["description"] = description[:500]

    params: Dict[str, Any] = dict(
        mode="payment",
        payment_method_types=["card"],
        line_items=[
            {
                "price_data": {
                    "currency": (currency or settings.DEFAULT_CURRENCY).lower(),
                    "product_data": product_data,
                    "unit_amount": int(unit_amount),
                },
                "quantity": 1,
            }
        ],
        success_url=success_url,
        cancel_url=cancel_url,
        metadata={key: str(value) for key, value in metadata.items() if value is not None},
    )
    if customer_email:
        params["customer_email"] = customer_email
    if expires_at is not None:
        params["expires_at"] = int(expires_at.timestamp())

    try:
        session = stripe.checkout.Session.create(**params)
    except stripe.StripeError as exc:
        logger.exception("Stripe checkout session creation failed: %s", exc)
        raise PaymentProviderError(
            getattr(exc, "user_message", None) or "Could not create checkout session."
        ) from exc

    logger.info(
        "Created checkout session %s (amount=%s, metadata=%s)",
        session["id"],
        unit_amount,
        params["metadata"],
    )
    return session


def retrieve_checkout_session(session_id: str):
    """
    Retrieve a Checkout Session by id.

    Raises:
        CheckoutSessionNotFound: unknown session id.
        PaymentProviderError: any other Stripe failure.
    """
    try:
        return stripe.checkout.Session.retrieve(session_id)
    except stripe.InvalidRequestError as exc:
        logger.warning("Checkout session %s not found: %s", session_id, exc)
        raise CheckoutSessionNotFound() from exc
    except stripe.StripeError as exc:
        logger.exception("Stripe checkout session retrieval failed: %s", exc)
        raise PaymentProviderError() from exc


def session_metadata(session) -> Dict[str, Any]:
    """Return the session metadata as a plain dict."""
    metadata = session.get("metadata") or {}
    return dict(metadata)


def is_session_paid(session) -> bool:
    return session.get("payment_status") == "paid"
