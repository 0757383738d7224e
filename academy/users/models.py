"""
Academy User Management Models

Extends Django's built-in User model with a profile holding marketplace
specific data and automatic profile management through Django signals.

Models:
- Profile: phone number and password reset state

Conventions:
- The email address is the login identifier; `username` mirrors it.
- The role is derived from `is_staff` (`admin` vs `user`).
"""

import secrets
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

__all__ = ["Profile"]

RESET_CODE_BYTES = 32


class Profile(models.Model):
    """
    Extended user profile.

    Attributes:
        user: One-to-one relationship with Django User model
        phone_number: Contact phone number given at registration
        reset_code: Pending password reset code (single use)
        reset_code_expires_at: Expiry of the pending reset code
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
        help_text=_("Associated user account"),
    )

    phone_number = models.CharField(
        max_length=32,
        blank=True,
        verbose_name=_("Phone Number"),
    )

    reset_code = models.CharField(
        max_length=128,
        blank=True,
        db_index=True,
        verbose_name=_("Password Reset Code"),
    )

    reset_code_expires_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Reset Code Expires At"),
    )

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")

    def __str__(self) -> str:
        return f"{self.user.username} Profile"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, phone_number={self.phone_number})>"

    def issue_reset_code(self, ttl_minutes=None) -> str:
        """
        Generate and store a new password reset code.

        Any previous code is replaced.

        Returns:
            The new code
        """
        ttl = ttl_minutes if ttl_minutes is not None else settings.PASSWORD_RESET_CODE_TTL_MINUTES
        self.reset_code = secrets.token_hex(RESET_CODE_BYTES)
        self.reset_code_expires_at = timezone.now() + timedelta(minutes=ttl)
        self.save(update_fields=["reset_code", "reset_code_expires_at"])
        return self.reset_code

    def reset_code_is_valid(self, code: str) -> bool:
        if not self.reset_code or not code:
            return False
        if self.reset_code_expires_at is None or self.reset_code_expires_at <= timezone.now():
            return False
        return secrets.compare_digest(self.reset_code, code)

    def clear_reset_code(self) -> None:
        self.reset_code = ""
        self.reset_code_expires_at = None
        self.save(update_fields=["reset_code", "reset_code_expires_at"])


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Automatically create a user profile when a new user is created.
    """
    if created:
        Profile.objects.get_or_create(user=instance)
