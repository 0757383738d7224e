"""
Academy Test Suite

Tests are grouped by functional area. Stripe is never called: checkout
session creation and retrieval are patched with `unittest.mock`.
"""
