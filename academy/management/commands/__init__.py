"""
Academy Management Commands Package

- init_admin: Seeds the admin account from ADMIN_EMAIL / ADMIN_PASSWORD
- cleanup_expired_bookings: Cancels pending stripe bookings past their checkout window
"""
