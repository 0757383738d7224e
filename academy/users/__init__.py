"""
Academy Users Package

Authentication, account self service and user administration.
"""
