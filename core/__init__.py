"""
Shared backend packages: Stripe integration.
"""
