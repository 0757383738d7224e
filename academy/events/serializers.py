"""
Academy Event Serializers
"""

from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from .models import Event, EventRegistration


class EventSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("1"))
    seats = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(
        choices=Event.EventType.choices,
        default=Event.EventType.REGULAR,
        error_messages={"invalid_choice": _("Invalid event type. Must be either 'regular' or 'coffee_meet'.")},
    )
    seats_left = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = (
            "id", "name", "description", "date", "location", "price", "type",
            "seats", "seats_left", "created_at", "updated_at",
        )
        read_only_fields = ("id", "seats_left", "created_at", "updated_at")

    def get_seats_left(self, obj) -> int:
        return obj.seats_left


class EventRegistrationSerializer(serializers.ModelSerializer):
    event_name = serializers.CharField(source="event.name", read_only=True)

    class Meta:
        model = EventRegistration
        fields = ("id", "event", "event_name", "project_name", "project_link", "paid", "created_at")
        read_only_fields = fields


class EventRegisterRequestSerializer(serializers.Serializer):
    """
    Body of the event registration. The project fields are required for
    coffee meets only; the event is passed in through the context.
    """

    project_name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    project_link = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):
        event = self.context["event"]
        if event.is_coffee_meet and not (attrs.get("project_name") and attrs.get("project_link")):
            raise serializers.ValidationError(
                _("project_name and project_link are required for coffee_meet events.")
            )
        if not event.is_coffee_meet:
            attrs = {}
        return attrs
