"""
Academy Consultation Serializers
"""

from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from academy.payments.models import PaidBooking
from .models import Consultation, ConsultationBooking


class ConsultationSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.01"),
        error_messages={"min_value": _("A valid price must be provided.")},
    )
    scheduled_at = serializers.DateTimeField(
        validators=[
            UniqueValidator(
                queryset=Consultation.objects.all(),
                message=_("Consultation already exists at this time."),
            )
        ]
    )

    class Meta:
        model = Consultation
        fields = (
            "id", "consultation_type", "scheduled_at", "price", "status", "user",
            "payment_method", "payment_status", "booked_at", "created_at", "updated_at",
        )
        read_only_fields = (
            "id", "status", "user", "payment_method", "payment_status",
            "booked_at", "created_at", "updated_at",
        )


class ConsultationSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Consultation
        fields = ("id", "consultation_type", "scheduled_at", "price", "status")
        read_only_fields = fields


class ConsultationBookingSerializer(serializers.ModelSerializer):
    consultation = ConsultationSummarySerializer(read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)
    user_full_name = serializers.SerializerMethodField()

    class Meta:
        model = ConsultationBooking
        fields = (
            "id", "consultation", "user", "user_email", "user_full_name", "payment_method",
            "payment_status", "status", "stripe_session_id", "paid_at", "created_at",
        )
        read_only_fields = fields

    def get_user_full_name(self, obj) -> str:
        return f"{obj.user.first_name} {obj.user.last_name}".strip()


class OfflineBookingSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(
        choices=[PaidBooking.PaymentMethod.CASH, PaidBooking.PaymentMethod.INTERNAL],
        error_messages={
            "invalid_choice": _("This method is only allowed for cash or internal transfer.")
        },
    )


class ConsultationCheckoutSerializer(serializers.Serializer):
    consultation_id = serializers.IntegerField(min_value=1)


class ConsultationVerifySerializer(serializers.Serializer):
    session_id = serializers.CharField(max_length=255)
    consultation_id = serializers.IntegerField(min_value=1)
