"""
Tests for registration, cookie based JWT login/refresh/logout and the
password reset flow.
"""

from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import User
from django.core import mail
from django.test import override_settings
from django.utils import timezone
from rest_framework import status
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from rest_framework_simplejwt.tokens import RefreshToken

from academy.models import Profile
from .utils import PASSWORD, AcademyAPITestCase, make_user

REGISTER_URL = "/api/auth/register/"
LOGIN_URL = "/api/auth/login/"
REFRESH_URL = "/api/auth/refresh-token/"
LOGOUT_URL = "/api/auth/logout/"
FORGOT_URL = "/api/auth/forgot-password/"
RESET_URL = "/api/auth/reset-password/"
ME_URL = "/api/users/me/"


class RegistrationTests(AcademyAPITestCase):
    def payload(self, **overrides):
        data = {
            "full_name": "Jane Mary Doe",
            "email": "Jane@Example.com",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
            "phone_number": "+15550001234",
        }
        data.update(overrides)
        return data

    def test_register_creates_user_and_sets_cookies(self):
        response = self.client.post(REGISTER_URL, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email="jane@example.com")
        self.assertEqual(user.username, "jane@example.com")
        self.assertEqual(user.first_name, "Jane")
        self.assertEqual(user.last_name, "Mary Doe")
        self.assertEqual(user.profile.phone_number, "+15550001234")
        self.assertEqual(response.data["user"]["role"], "user")
        self.assertNotIn("access", response.data)
        self.assertTrue(response.cookies["access_token"].value)
        self.assertTrue(response.cookies["refresh_token"]["httponly"])

    def test_registered_user_is_logged_in(self):
        self.client.post(REGISTER_URL, self.payload(), format="json")

        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "jane@example.com")

    def test_duplicate_email_conflicts(self):
        make_user(email="jane@example.com")

        response = self.client.post(REGISTER_URL, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(User.objects.filter(email__iexact="jane@example.com").count(), 1)

    def test_password_mismatch(self):
        response = self.client.post(
            REGISTER_URL, self.payload(confirm_password="Other-Pass-123!"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("confirm_password", response.data)

    def test_short_fields_are_rejected(self):
        response = self.client.post(
            REGISTER_URL,
            self.payload(full_name="Jo", phone_number="123", password="short", confirm_password="short"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ("full_name", "phone_number", "password"):
            self.assertIn(field, response.data)
        self.assertFalse(User.objects.exists())


class LoginTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user(email="max@example.com", first_name="Max")

    def login(self, email="max@example.com", password=PASSWORD):
        return self.client.post(LOGIN_URL, {"email": email, "password": password}, format="json")

    def test_login_moves_tokens_into_cookies(self):
        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn("access", response.data)
        self.assertNotIn("refresh", response.data)
        self.assertEqual(response.data["user"]["email"], "max@example.com")
        self.assertTrue(response.cookies["access_token"].value)
        self.assertTrue(response.cookies["refresh_token"].value)

    def test_login_is_case_insensitive_on_email(self):
        response = self.login(email="MAX@example.com")

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_wrong_password(self):
        response = self.login(password="wrong-password")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertNotIn("access_token", response.cookies)

    def test_inactive_user_cannot_login(self):
        self.user.is_active = False
        self.user.save()

        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cookie_authenticates_requests(self):
        self.login()

        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], self.user.pk)

    def test_bearer_header_authenticates_requests(self):
        token = RefreshToken.for_user(self.user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_anonymous_request_is_rejected(self):
        response = self.client.get(ME_URL)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @mock.patch.dict(ScopedRateThrottle.THROTTLE_RATES, {"login": "2/hour"})
    def test_login_is_rate_limited(self):
        self.login(password="wrong-password")
        self.login(password="wrong-password")

        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)


class RefreshAndLogoutTests(AcademyAPITestCase):
    def setUp(self):
        super().setUp()
        self.user = make_user()
        response = self.client.post(
            LOGIN_URL, {"email": self.user.email, "password": PASSWORD}, format="json"
        )
        self.refresh_token = response.cookies["refresh_token"].value

    def test_refresh_token_success(self):
        response = self.client.post(REFRESH_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.cookies["access_token"].value)
        self.assertNotEqual(response.cookies["refresh_token"].value, self.refresh_token)

    def test_refresh_token_failure(self):
        self.client.cookies["refresh_token"] = "bad token"

        response = self.client.post(REFRESH_URL)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_token_missing(self):
        del self.client.cookies["refresh_token"]

        response = self.client.post(REFRESH_URL)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_blacklists_and_clears_cookies(self):
        response = self.client.post(LOGOUT_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies["access_token"].value, "")
        self.assertEqual(response.cookies["refresh_token"].value, "")
        self.assertEqual(BlacklistedToken.objects.count(), 1)

        self.client.cookies["refresh_token"] = self.refresh_token
        self.assertEqual(self.client.post(REFRESH_URL).status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_without_cookies(self):
        self.client.cookies.clear()

        response = self.client.post(LOGOUT_URL)

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class PasswordResetTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user(email="reset@example.com", first_name="Rita")

    @override_settings(FRONTEND_URL="https://academy.test")
    def test_forgot_password_emails_reset_link(self):
        response = self.client.post(FORGOT_URL, {"email": "reset@example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        profile = Profile.objects.get(user=self.user)
        self.assertEqual(len(profile.reset_code), 64)
        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.to, ["reset@example.com"])
        self.assertIn(f"https://academy.test/reset-password?code={profile.reset_code}", message.body)

    def test_forgot_password_unknown_email(self):
        response = self.client.post(FORGOT_URL, {"email": "nobody@example.com"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(len(mail.outbox), 0)

    def test_reset_password_with_valid_code(self):
        code = self.user.profile.issue_reset_code()
        new_password = "An0ther-Str0ng-Pass"

        response = self.client.post(
            RESET_URL,
            {
                "reset_code": code,
                "email": "reset@example.com",
                "password": new_password,
                "confirm_password": new_password,
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(new_password))
        self.assertEqual(Profile.objects.get(user=self.user).reset_code, "")

    def test_reset_code_is_single_use(self):
        code = self.user.profile.issue_reset_code()
        payload = {
            "reset_code": code,
            "email": "reset@example.com",
            "password": "An0ther-Str0ng-Pass",
            "confirm_password": "An0ther-Str0ng-Pass",
        }
        self.client.post(RESET_URL, payload, format="json")

        response = self.client.post(RESET_URL, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("reset_code", response.data)

    def test_expired_reset_code(self):
        profile = self.user.profile
        code = profile.issue_reset_code()
        profile.reset_code_expires_at = timezone.now() - timedelta(minutes=1)
        profile.save()

        response = self.client.post(
            RESET_URL,
            {
                "reset_code": code,
                "email": "reset@example.com",
                "password": "An0ther-Str0ng-Pass",
                "confirm_password": "An0ther-Str0ng-Pass",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(PASSWORD))
