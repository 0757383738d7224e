"""
Academy User Self Service

Lets an authenticated user read and update their own account and change
their password.

Views:
- CurrentUserView: GET / PUT / PATCH /api/users/me/
- ChangePasswordView: PUT /api/users/me/password/
"""

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..serializers import PasswordChangeSerializer, UserSerializer, UserUpdateSerializer

logger = logging.getLogger(__name__)


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)

    def put(self, request):
        serializer = UserUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User %s updated their account", user.pk)
        return Response(UserSerializer(user).data)

    patch = put


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = PasswordChangeSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("User %s changed their password", request.user.pk)
        return Response({"detail": _("Password updated successfully.")}, status=status.HTTP_200_OK)
