"""
Academy Application Package

Marketplace backend for courses, consultations, events and learning content.
Users register and authenticate with cookie-based JWTs, book paid offerings
through Stripe hosted Checkout and access what they purchased. Administrators
curate the catalog (courses, consultation slots, events, FAQs, podcasts).

Subpackages:
- users/          Authentication, account and profile management
- payments/       Shared booking/payment state machine (PaidBooking + services)
- courses/        Recorded and in-person courses with their bookings
- consultations/  Bookable consultation slots
- events/         Events and event registrations
- content/        FAQs and podcasts
- contact/        Contact form
- user_content/   Aggregated view of everything a user purchased
"""
