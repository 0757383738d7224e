"""
Academy Consultations Package

Bookable consultation slots created by admins. Users book a slot with an
offline payment (cash, internal transfer) or through Stripe Checkout.
"""
