"""
Email Authentication Backend

Accounts are identified by their email address. The username column still
exists (Django's default user model) but is filled with the email at
registration, so this backend only has to match case-insensitively on email.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class EmailBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        email = email or username or kwargs.get(User.USERNAME_FIELD)
        if not email or password is None:
            return None

        user = User.objects.filter(email__iexact=email).order_by("id").first()
        if user is None:
            # Run the hasher anyway to keep timing uniform
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
