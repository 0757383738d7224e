"""
Academy User Administration Views

Administrative user management: list, inspect, delete and aggregate
statistics. Admin accounts cannot be deleted through the API.

Views:
- UserAdminViewSet: /api/users/ (list), /api/users/<id>/ (retrieve, delete),
  /api/users/statistics/

Permissions:
- Requires administrator privileges (IsAdminUser)
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet
from django.utils.translation import gettext_lazy as _
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.request import Request
from rest_framework.response import Response

from ..serializers import UserSerializer

logger = logging.getLogger(__name__)
User = get_user_model()


class UserAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    User administration ViewSet.

    Query Parameters (list):
    - role: `admin` or `user`
    - search: matches email, first or last name (case-insensitive)
    """

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAdminUser]

    def get_queryset(self) -> QuerySet:
        """
        Get queryset with profile prefetching, optionally filtered.
        """
        queryset = User.objects.select_related("profile").order_by("-date_joined", "-id")

        role = self.request.query_params.get("role")
        if role == "admin":
            queryset = queryset.filter(is_staff=True)
        elif role == "user":
            queryset = queryset.filter(is_staff=False)

        search = self.request.query_params.get("search")
        if search:
            queryset = queryset.filter(
                Q(email__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
            )
        return queryset

    def perform_destroy(self, instance) -> None:
        """
        Delete a regular user. Related bookings and the profile cascade.

        Raises:
            PermissionDenied: when the target is an admin account
        """
        if instance.is_staff:
            raise PermissionDenied(_("Admin users cannot be deleted."))
        logger.info("User %s deleted by admin %s", instance.pk, self.request.user.pk)
        super().perform_destroy(instance)

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        super().destroy(request, *args, **kwargs)
        return Response({"detail": _("User deleted successfully.")}, status=status.HTTP_200_OK)

    @action(
        detail=False,
        methods=["get"],
        url_path="statistics",
        permission_classes=[permissions.IsAdminUser],
    )
    def user_statistics(self, request: Request) -> Response:
        """
        Get user statistics for administrative overview.
        """
        queryset = User.objects.all()
        statistics = {
            "total_users": queryset.count(),
            "active_users": queryset.filter(is_active=True).count(),
            "admin_users": queryset.filter(is_staff=True).count(),
            "regular_users": queryset.filter(is_staff=False).count(),
        }
        return Response(statistics, status=status.HTTP_200_OK)
