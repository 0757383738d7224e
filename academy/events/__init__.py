"""
Academy Events Package

Paid events (regular talks and coffee meets). A registration only exists
once the Stripe payment went through.
"""
