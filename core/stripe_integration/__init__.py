"""
Stripe Integration Package
==========================

Centralizes all Stripe-related logic for the academy backend. Feature apps
never import the Stripe SDK themselves; they go through this package.

Current Scope
-------------
- `checkout.py`   → thin wrapper over hosted Checkout Sessions
                    (create / retrieve) with SDK errors mapped to API errors.
- `signals.py`    → reacts to verified webhook events persisted by dj-stripe
                    and re-emits them as plain Django signals
                    (`checkout_session_completed`, `checkout_session_expired`).
- `views.py`      → public endpoint returning the publishable key.
- `exceptions.py` → API exceptions raised by the wrapper.

Design Rationale
----------------
- Core placement: billing is not tied to one product. Courses, consultations
  and events all pay through the same checkout wrapper.
- dj-stripe bridge: dj-stripe verifies webhook signatures and de-duplicates
  events. We only listen to the persisted `Event` rows.
- Decoupling: this package knows nothing about bookings. The academy app
  subscribes to the signals and owns the booking state machine.

Structure
---------
- apps.py         → App configuration (`StripeIntegrationConfig`)
- checkout.py     → Checkout Session create / retrieve
- exceptions.py   → PaymentProviderError, CheckoutSessionNotFound
- signals.py      → Event post-processing + custom signals
- views.py        → API endpoints
- urls.py         → Routes for Stripe endpoints
"""
