"""
Academy Payments Package

Shared booking/payment state machine used by consultations, in-person
courses, recorded courses and events.

- models.py     → abstract `PaidBooking` + queryset helpers
- services.py   → checkout start, session confirmation/expiry, cleanup
- receivers.py  → hooks the services up to the Stripe webhook signals
- exceptions.py → booking related API exceptions
"""
