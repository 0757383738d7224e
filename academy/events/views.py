"""
Academy Event Views

Views:
- EventViewSet: Public list/detail, admin create/update/delete,
  `POST /api/events/<id>/register/` starts the Stripe checkout,
  `POST /api/events/verify-payment/` creates the paid registration
"""

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.stripe_integration.checkout import is_session_paid
from academy.payments import services
from academy.payments.exceptions import BookingUnavailable, PaymentNotCompleted
from academy.payments.serializers import SessionIdSerializer
from academy.permissions import IsAdminOrReadOnly
from .models import Event, EventRegistration
from .serializers import (
    EventRegisterRequestSerializer,
    EventRegistrationSerializer,
    EventSerializer,
)

logger = logging.getLogger(__name__)


class EventViewSet(viewsets.ModelViewSet):
    serializer_class = EventSerializer
    queryset = Event.objects.all()

    def get_permissions(self):
        if self.action in ("register", "verify_payment"):
            return [permissions.IsAuthenticated()]
        return [IsAdminOrReadOnly()]

    def destroy(self, request, *args, **kwargs):
        event = self.get_object()
        logger.info("Event %s deleted", event.pk)
        event.delete()
        return Response({"detail": _("Event deleted successfully")}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="register")
    def register(self, request, pk=None):
        event = self.get_object()

        if event.seats_taken >= event.seats:
            raise BookingUnavailable(_("Event is full."))
        if EventRegistration.objects.filter(user=request.user, event=event).exists():
            raise BookingUnavailable(_("You are already registered."))

        body = EventRegisterRequestSerializer(data=request.data, context={"event": event})
        body.is_valid(raise_exception=True)

        session = services.create_checkout(
            user=request.user,
            booking_type=services.EVENT,
            name=f"Registration for event: {event.name}",
            description=event.description,
            price=event.price,
            success_path="events/success",
            cancel_path=f"events/{event.pk}",
            metadata={
                "event_id": event.pk,
                "project_name": body.validated_data.get("project_name", ""),
                "project_link": body.validated_data.get("project_link", ""),
            },
        )
        return Response(
            {"checkout_url": session["url"], "session_id": session["id"]},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request):
        body = SessionIdSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        session = services.retrieve_session_for_user(
            body.validated_data["session_id"], request.user, services.EVENT
        )
        if not is_session_paid(session):
            raise PaymentNotCompleted()

        registration, created = services.confirm_paid_session(session)
        detail = _("Registration confirmed.") if created else _("You are already registered.")
        return Response(
            {"detail": detail, "registration": EventRegistrationSerializer(registration).data},
            status=status.HTTP_200_OK,
        )
