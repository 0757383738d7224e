"""
Academy Consultation Views

Views:
- ConsultationCreateView: Admin creates a slot
- AvailableConsultationListView: Public list of free slots
- BookConsultationView: Book a slot with cash / internal transfer
- ConsultationCheckoutView: Start Stripe checkout for a slot
- ConsultationVerifyPaymentView: Client-polled payment verification
- PaymentHistoryView / AllPaymentsView: Own / all consultation payments
"""

import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.stripe_integration.checkout import is_session_paid, session_metadata
from academy.payments import services
from academy.payments.exceptions import BookingNotFound, BookingUnavailable
from .models import Consultation, ConsultationBooking
from .serializers import (
    ConsultationBookingSerializer,
    ConsultationCheckoutSerializer,
    ConsultationSerializer,
    ConsultationVerifySerializer,
    OfflineBookingSerializer,
)

logger = logging.getLogger(__name__)


class ConsultationCreateView(generics.CreateAPIView):
    serializer_class = ConsultationSerializer
    permission_classes = [permissions.IsAdminUser]

    def perform_create(self, serializer):
        consultation = serializer.save()
        logger.info("Consultation slot %s created for %s", consultation.pk, consultation.scheduled_at)


class AvailableConsultationListView(generics.ListAPIView):
    serializer_class = ConsultationSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        return Consultation.objects.filter(status=Consultation.Status.AVAILABLE).order_by("scheduled_at")


class BookConsultationView(APIView):
    """
    PUT /api/consultations/book/<id>/  {"payment_method": "cash" | "internal"}

    The slot is booked right away; the payment is confirmed later by an admin.
    """

    permission_classes = [permissions.IsAuthenticated]

    def put(self, request, pk):
        body = OfflineBookingSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        payment_method = body.validated_data["payment_method"]

        with transaction.atomic():
            consultation = Consultation.objects.select_for_update().filter(pk=pk).first()
            if consultation is None or not consultation.is_available:
                raise BookingUnavailable(_("Consultation not available"))

            consultation.reserve(
                request.user,
                payment_method=payment_method,
                payment_status=Consultation.PaymentStatus.PENDING,
            )
            ConsultationBooking.objects.create(
                user=request.user,
                consultation=consultation,
                payment_method=payment_method,
            )

        logger.info(
            "Consultation %s booked by user %s (%s)", consultation.pk, request.user.pk, payment_method
        )
        return Response(ConsultationSerializer(consultation).data, status=status.HTTP_200_OK)


class ConsultationCheckoutView(APIView):
    """
    POST /api/consultations/create-checkout-session/  {"consultation_id": 1}
    """

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        body = ConsultationCheckoutSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        consultation = get_object_or_404(Consultation, pk=body.validated_data["consultation_id"])
        if not consultation.is_available:
            raise BookingUnavailable(_("Consultation is not available for booking."))
        if consultation.price is None or consultation.price <= 0:
            raise BookingUnavailable(_("Consultation price is invalid."))

        booking, session = services.start_checkout(
            booking_type=services.CONSULTATION,
            booking_fields={"consultation": consultation},
            user=request.user,
            name=f"Consultation: {consultation.consultation_type}",
            price=consultation.price,
            success_path="payment-success",
            cancel_path=f"consultations/{consultation.pk}",
            metadata={"consultation_id": consultation.pk},
            url_params={"consultation_id": consultation.pk},
        )
        return Response(
            {"checkout_url": session["url"], "session_id": session["id"], "booking_id": booking.pk},
            status=status.HTTP_200_OK,
        )


class ConsultationVerifyPaymentView(APIView):
    """
    GET /api/consultations/verify-payment/?session_id=cs_...&consultation_id=1

    Returns `status: pending` while the session is unpaid.
    """

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = ConsultationVerifySerializer(data=request.query_params)
        if not params.is_valid():
            return Response(
                {"detail": _("Session ID or consultation ID is missing."), "errors": params.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        session = services.retrieve_session_for_user(
            params.validated_data["session_id"], request.user, services.CONSULTATION
        )
        if str(session_metadata(session).get("consultation_id")) != str(params.validated_data["consultation_id"]):
            raise BookingNotFound()

        if not is_session_paid(session):
            return Response(
                {"status": "pending", "detail": _("Waiting for the payment to complete.")},
                status=status.HTTP_200_OK,
            )

        booking, changed = services.confirm_paid_session(session)
        booking.consultation.refresh_from_db()
        return Response(
            {
                "status": "success",
                "detail": _("Payment verified successfully.") if changed else _("Payment already verified."),
                "booking": ConsultationBookingSerializer(booking).data,
                "consultation": ConsultationSerializer(booking.consultation).data,
            },
            status=status.HTTP_200_OK,
        )


class PaymentHistoryView(generics.ListAPIView):
    serializer_class = ConsultationBookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return (
            ConsultationBooking.objects.filter(user=self.request.user)
            .select_related("consultation", "user")
            .order_by("-created_at")
        )


class AllPaymentsView(generics.ListAPIView):
    serializer_class = ConsultationBookingSerializer
    permission_classes = [permissions.IsAdminUser]

    def get_queryset(self):
        queryset = ConsultationBooking.objects.select_related("consultation", "user").order_by("-created_at")
        payment_status = self.request.query_params.get("payment_status")
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)
        return queryset
