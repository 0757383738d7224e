"""
Academy User Authentication Views

Authentication endpoints. JWTs never appear in response bodies; they are
stored in HTTP-only cookies (`access_token`, `refresh_token`).

Views:
- RegisterView: Public registration, logs the new user in
- LoginView: Email + password login (rate limited, scope `login`)
- RefreshTokenView: Rotates both cookies from the refresh cookie
- LogoutView: Blacklists the refresh token and clears the cookies
- ForgotPasswordView: Emails a time-limited reset link
- ResetPasswordView: Sets a new password from a reset code
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import AuthenticationFailed, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from backend.custom_auth import ACCESS_COOKIE, REFRESH_COOKIE
from academy.mailing import send_templated_email
from academy.payments.services import frontend_url
from ..models import Profile
from ..serializers import (
    EmailTokenObtainPairSerializer,
    ForgotPasswordSerializer,
    RegistrationSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


def set_auth_cookies(response, access=None, refresh=None):
    """
    Store tokens in HTTP-only cookies.
     * httponly=True → prevents JavaScript access (mitigates XSS attacks)
     * secure / samesite → from JWT_COOKIE_SECURE / JWT_COOKIE_SAMESITE
    """
    if refresh:
        response.set_cookie(
            REFRESH_COOKIE,
            str(refresh),
            httponly=True,
            secure=settings.JWT_COOKIE_SECURE,
            samesite=settings.JWT_COOKIE_SAMESITE,
            path="/",
            max_age=settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"],
        )
    if access:
        response.set_cookie(
            ACCESS_COOKIE,
            str(access),
            httponly=True,
            secure=settings.JWT_COOKIE_SECURE,
            samesite=settings.JWT_COOKIE_SAMESITE,
            path="/",
            max_age=settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"],
        )
    return response


def clear_auth_cookies(response):
    response.delete_cookie(REFRESH_COOKIE, path="/", samesite=settings.JWT_COOKIE_SAMESITE)
    response.delete_cookie(ACCESS_COOKIE, path="/", samesite=settings.JWT_COOKIE_SAMESITE)
    return response


class RegisterView(generics.CreateAPIView):
    """
    Public registration endpoint.

    Request Body Example (JSON):
    {
        "full_name": "Jane Doe",
        "email": "jane@example.com",
        "password": "secret-pass-123",
        "confirm_password": "secret-pass-123",
        "phone_number": "+15550001234"
    }

    Responses:
        201 with the new user (auth cookies set)
        400 validation errors
        409 email already registered
    """

    serializer_class = RegistrationSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s (%s)", user.pk, user.email)

        refresh = EmailTokenObtainPairSerializer.get_token(user)
        response = Response(
            {"detail": _("Registration successful."), "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )
        return set_auth_cookies(response, access=refresh.access_token, refresh=refresh)


class LoginView(TokenObtainPairView):
    """
    Email login extending SimpleJWT's TokenObtainPairView.
    - Calls the parent class's `post` method to get access/refresh tokens.
    - Removes tokens from the response payload to avoid exposing them in JSON.
    - Sets `refresh_token` and `access_token` cookies.
    """

    serializer_class = EmailTokenObtainPairSerializer
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "login"

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == status.HTTP_200_OK:
            data = response.data
            refresh = data.pop("refresh", None)
            access = data.pop("access", None)
            set_auth_cookies(response, access=access, refresh=refresh)
        return response


class RefreshTokenView(APIView):
    """
    Refreshes JWT tokens from the `refresh_token` cookie and stores the rotated
    pair in cookies again. 400 if the cookie is missing or the token invalid.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if not refresh_token:
            return Response(
                {"detail": _("Refresh token not provided")},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except (TokenError, AuthenticationFailed) as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        response = Response({"detail": _("Token refreshed.")}, status=status.HTTP_200_OK)
        return set_auth_cookies(response, access=data.get("access"), refresh=data.get("refresh"))


class LogoutView(APIView):
    """
    Logout by invalidating the refresh token and clearing cookies.
    - Blacklists the refresh token from the cookie if present.
    - An already invalid token does not prevent logout.
    - Always returns 200 and deletes both cookies.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.info("Logout with unusable refresh token: %s", e)
        response = Response({"detail": _("Successfully logged out.")}, status=status.HTTP_200_OK)
        return clear_auth_cookies(response)


class ForgotPasswordView(APIView):
    """
    Starts the password reset flow.

    Stores a random reset code on the profile, valid for
    PASSWORD_RESET_CODE_TTL_MINUTES, and emails the link
    `FRONTEND_URL/reset-password?code=...`.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "login"

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            return Response(
                {"detail": _("No account found with this email.")},
                status=status.HTTP_404_NOT_FOUND,
            )

        profile, _created = Profile.objects.get_or_create(user=user)
        code = profile.issue_reset_code()

        sent = send_templated_email(
            subject="Password reset",
            template_name="academy/emails/password_reset.html",
            context={
                "name": user.first_name or user.email,
                "reset_url": frontend_url("reset-password", code=code),
                "ttl_minutes": settings.PASSWORD_RESET_CODE_TTL_MINUTES,
            },
            to=[user.email],
        )
        if not sent:
            profile.clear_reset_code()
            return Response(
                {"detail": _("Failed to send the reset email. Please try again.")},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info("Password reset requested for user %s", user.pk)
        return Response(
            {"detail": _("Password reset link sent to your email.")},
            status=status.HTTP_200_OK,
        )


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Password reset completed for user %s", user.pk)
        return Response(
            {"detail": _("Password has been reset successfully.")},
            status=status.HTTP_200_OK,
        )
