"""
Academy User Content Package

Aggregated view of everything the current user has paid for.
"""
