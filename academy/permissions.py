"""
Academy Permissions

- IsAdminOrReadOnly: public reads, staff-only writes (catalog endpoints)
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsAdminOrReadOnly(BasePermission):
    """Read access for everyone, write access for staff only."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
