"""
Academy User Management Serializers

Serializers for registration, email login, account data and password
operations.

Serializers:
- EmailTokenObtainPairSerializer: JWT login by email with user metadata
- RegistrationSerializer: Public sign-up (full name, email, phone, password)
- UserSerializer: Read representation of an account
- UserUpdateSerializer: Self-service account update
- PasswordChangeSerializer: Change password with the old one
- ForgotPasswordSerializer / ResetPasswordSerializer: Reset code flow
"""

from typing import Any, Dict, Tuple

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers, status
from rest_framework.exceptions import APIException
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Profile

User = get_user_model()


class EmailAlreadyRegistered(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = _("A user with this email already exists.")
    default_code = "email_exists"


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split "Jane Mary Doe" into ("Jane", "Mary Doe")."""
    parts = full_name.strip().split(None, 1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def user_role(user) -> str:
    return "admin" if user.is_staff else "user"


def _run_password_validators(value: str, user=None) -> str:
    try:
        validate_password(value, user=user)
    except DjangoValidationError as e:
        raise serializers.ValidationError(list(e.messages))
    return value


class UserSerializer(serializers.ModelSerializer):
    """
    Account representation returned by auth and user endpoints.
    """

    full_name = serializers.SerializerMethodField()
    phone_number = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = (
            "id", "email", "full_name", "first_name", "last_name", "phone_number",
            "role", "is_active", "date_joined", "last_login",
        )
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        """
        Get formatted full name of the user.

        Returns:
            Formatted full name or email if names are not available
        """
        full_name = f"{obj.first_name} {obj.last_name}".strip()
        return full_name or obj.email or obj.username

    def get_phone_number(self, obj) -> str:
        profile = getattr(obj, "profile", None)
        return profile.phone_number if profile else ""

    def get_role(self, obj) -> str:
        return user_role(obj)


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login with email + password.

    Token payload includes email, is_staff and role. The response carries the
    serialized user next to the tokens; the view moves the tokens into cookies.
    """

    username_field = "email"

    @classmethod
    def get_token(cls, user) -> RefreshToken:
        token = super().get_token(user)
        token["email"] = user.email
        token["is_staff"] = user.is_staff
        token["role"] = user_role(user)
        return token

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data


class RegistrationSerializer(serializers.Serializer):
    """
    Public registration.

    Fields:
    - full_name: at least 3 characters, split into first/last name
    - email: unique (409 on conflict), used as username
    - password / confirm_password: must match, Django password validators
    - phone_number: at least 10 characters
    """

    full_name = serializers.CharField(min_length=3, max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True, min_length=8, style={"input_type": "password"}
    )
    confirm_password = serializers.CharField(
        write_only=True, style={"input_type": "password"}
    )
    phone_number = serializers.CharField(min_length=10, max_length=32)

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise EmailAlreadyRegistered()
        return value

    def validate_password(self, value: str) -> str:
        return _run_password_validators(value)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data["password"] != data["confirm_password"]:
            raise serializers.ValidationError(
                {"confirm_password": _("Passwords do not match.")}
            )
        return data

    @transaction.atomic
    def create(self, validated_data: Dict[str, Any]):
        first_name, last_name = split_full_name(validated_data["full_name"])
        user = User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=first_name,
            last_name=last_name,
        )
        profile, _created = Profile.objects.get_or_create(user=user)
        profile.phone_number = validated_data["phone_number"]
        profile.save(update_fields=["phone_number"])
        return user


class UserUpdateSerializer(serializers.Serializer):
    """
    Self-service update of name, email and phone number.
    At least one field must be present.
    """

    full_name = serializers.CharField(min_length=3, max_length=150, required=False)
    email = serializers.EmailField(required=False)
    phone_number = serializers.CharField(min_length=10, max_length=32, required=False)

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        user_id = self.instance.id if self.instance else None
        if User.objects.filter(email__iexact=value).exclude(id=user_id).exists():
            raise EmailAlreadyRegistered()
        return value

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data:
            raise serializers.ValidationError(_("At least one field must be provided."))
        return data

    @transaction.atomic
    def update(self, instance, validated_data: Dict[str, Any]):
        if "full_name" in validated_data:
            instance.first_name, instance.last_name = split_full_name(validated_data["full_name"])
        if "email" in validated_data:
            instance.email = validated_data["email"]
            instance.username = validated_data["email"]
        instance.save()

        if "phone_number" in validated_data:
            profile, _created = Profile.objects.get_or_create(user=instance)
            profile.phone_number = validated_data["phone_number"]
            profile.save(update_fields=["phone_number"])
        return instance


class PasswordChangeSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True, style={"input_type": "password"})
    new_password = serializers.CharField(
        write_only=True, min_length=8, style={"input_type": "password"}
    )

    def validate_old_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError(_("Old password is incorrect."))
        return value

    def validate_new_password(self, value: str) -> str:
        return _run_password_validators(value, user=self.context["request"].user)

    def save(self, **kwargs):
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    """
    Completes a password reset. The code must belong to the given email and
    must not be expired. It is cleared after use.
    """

    reset_code = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True, min_length=8, style={"input_type": "password"}
    )
    confirm_password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate_password(self, value: str) -> str:
        return _run_password_validators(value)

    def validate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data["password"] != data["confirm_password"]:
            raise serializers.ValidationError(
                {"confirm_password": _("Passwords do not match.")}
            )

        profile = (
            Profile.objects.select_related("user")
            .filter(user__email__iexact=data["email"], reset_code=data["reset_code"])
            .first()
        )
        if profile is None or not profile.reset_code_is_valid(data["reset_code"]):
            raise serializers.ValidationError(
                {"reset_code": _("Invalid or expired reset code.")}
            )
        data["profile"] = profile
        return data

    @transaction.atomic
    def save(self, **kwargs):
        profile = self.validated_data["profile"]
        user = profile.user
        user.set_password(self.validated_data["password"])
        user.save(update_fields=["password"])
        profile.clear_reset_code()
        return user
