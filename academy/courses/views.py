"""
Academy Course Views

Views:
- CourseListView / CourseDetailView: Public catalog of all courses
- RecordedCourseViewSet: Recorded course CRUD (admin writes, multipart
  `files`), purchase via Stripe and payment verification
- InPersonCourseViewSet: In-person course CRUD, seat booking (stripe, cash,
  external), payment verification, own bookings and stale booking cleanup

Booking state transitions go through `academy.payments.services`.
"""

import logging

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from rest_framework import generics, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from core.stripe_integration.checkout import is_session_paid
from academy.payments import services
from academy.payments.exceptions import BookingUnavailable, PaymentNotCompleted
from academy.payments.serializers import SessionIdSerializer
from academy.permissions import IsAdminOrReadOnly
from .models import Course, CourseFile, InPersonCourse, InPersonCourseBooking, RecordedCourseBooking
from .serializers import (
    CourseSerializer,
    InPersonCourseBookingSerializer,
    InPersonCourseBookRequestSerializer,
    InPersonCourseSerializer,
    RecordedCourseBookingSerializer,
    RecordedCourseBookRequestSerializer,
    RecordedCourseSerializer,
)

logger = logging.getLogger(__name__)

USER_ACTIONS = {"book", "verify_payment", "checkout_session", "user_bookings"}


class CourseListView(generics.ListAPIView):
    """
    Public list of all courses.

    Query Parameters:
    - type: `recorded` or `in_person`
    """

    serializer_class = CourseSerializer
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        queryset = Course.objects.select_related("in_person").prefetch_related("files")
        course_type = self.request.query_params.get("type")
        if course_type in Course.CourseType.values:
            queryset = queryset.filter(course_type=course_type)
        return queryset


class CourseDetailView(generics.RetrieveAPIView):
    serializer_class = CourseSerializer
    permission_classes = [permissions.AllowAny]
    queryset = Course.objects.select_related("in_person").prefetch_related("files")


class _BookingViewSetMixin:
    """Per-action permissions shared by the course ViewSets."""

    def get_permissions(self):
        if self.action in USER_ACTIONS:
            return [permissions.IsAuthenticated()]
        if self.action == "cleanup_expired":
            return [permissions.IsAdminUser()]
        return [IsAdminOrReadOnly()]

    def _verify(self, request, booking_type, serializer_class):
        body = SessionIdSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        session = services.retrieve_session_for_user(
            body.validated_data["session_id"], request.user, booking_type
        )
        if not is_session_paid(session):
            raise PaymentNotCompleted()

        booking, changed = services.confirm_paid_session(session)
        detail = _("Payment verified successfully.") if changed else _("Payment already verified.")
        return Response(
            {"detail": detail, "booking": serializer_class(booking, context={"request": request}).data},
            status=status.HTTP_200_OK,
        )


class RecordedCourseViewSet(_BookingViewSetMixin, viewsets.ModelViewSet):
    """
    Recorded courses.

    Endpoints:
    - GET/POST /api/recorded-courses/
    - GET/PUT/PATCH/DELETE /api/recorded-courses/<id>/
    - POST /api/recorded-courses/book/            {"course_id": 1}
    - POST /api/recorded-courses/verify-payment/  {"session_id": "cs_..."}
    """

    serializer_class = RecordedCourseSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_queryset(self):
        return Course.objects.filter(course_type=Course.CourseType.RECORDED).prefetch_related(
            Prefetch("files", queryset=CourseFile.objects.order_by("uploaded_at", "id"))
        )

    def perform_create(self, serializer):
        course = serializer.save(files=self.request.FILES.getlist("files"))
        logger.info("Recorded course %s created with %s file(s)", course.pk, course.files.count())

    def perform_update(self, serializer):
        course = serializer.save(files=self.request.FILES.getlist("files"))
        logger.info("Recorded course %s updated", course.pk)

    def perform_destroy(self, instance):
        for course_file in instance.files.all():
            course_file.file.delete(save=False)
        logger.info("Recorded course %s deleted", instance.pk)
        instance.delete()

    @action(detail=False, methods=["post"], url_path="book")
    def book(self, request):
        """Start the Stripe checkout for a recorded course."""
        body = RecordedCourseBookRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)

        course = get_object_or_404(
            Course, pk=body.validated_data["course_id"], course_type=Course.CourseType.RECORDED
        )
        if RecordedCourseBooking.objects.paid().filter(user=request.user, course=course).exists():
            raise BookingUnavailable(_("You have already purchased this course."))

        booking, session = services.start_checkout(
            booking_type=services.RECORDED_COURSE,
            booking_fields={"course": course},
            user=request.user,
            name=course.title,
            description=course.description,
            price=course.price,
            success_path="recorded-courses/payment-success",
            cancel_path=f"recorded-courses/{course.pk}",
            metadata={"course_id": course.pk},
            url_params={"course_id": course.pk},
        )
        return Response(
            {"checkout_url": session["url"], "session_id": session["id"], "booking_id": booking.pk},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request):
        return self._verify(request, services.RECORDED_COURSE, RecordedCourseBookingSerializer)


class InPersonCourseViewSet(_BookingViewSetMixin, viewsets.ModelViewSet):
    """
    In-person courses.

    Endpoints:
    - GET/POST /api/in-person-courses/
    - GET/PUT/PATCH/DELETE /api/in-person-courses/<id>/
    - POST /api/in-person-courses/checkout-session/
        {"in_person_course_id": 1, "payment_method": "stripe" | "cash" | "external"}
    - POST /api/in-person-courses/verify-payment/   {"session_id": "cs_..."}
    - GET /api/in-person-courses/bookings/user/
    - DELETE /api/in-person-courses/cleanup-expired/ (admin)
    """

    serializer_class = InPersonCourseSerializer
    queryset = InPersonCourse.objects.select_related("course")

    def perform_destroy(self, instance):
        # the catalog entry goes with it
        logger.info("In-person course %s deleted", instance.pk)
        instance.course.delete()

    @action(detail=False, methods=["post"], url_path="checkout-session")
    def checkout_session(self, request):
        body = InPersonCourseBookRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        payment_method = body.validated_data["payment_method"]

        in_person_course = get_object_or_404(
            InPersonCourse.objects.select_related("course"),
            pk=body.validated_data["in_person_course_id"],
        )
        course = in_person_course.course

        if payment_method == InPersonCourseBooking.PaymentMethod.STRIPE:
            booking, session = services.start_checkout(
                booking_type=services.IN_PERSON_COURSE,
                booking_fields={"in_person_course": in_person_course},
                user=request.user,
                name=f"Course: {course.title}",
                description=course.description,
                price=course.price,
                success_path="payment-success",
                cancel_path=f"in-person-courses/{in_person_course.pk}",
                metadata={"course_id": course.pk, "in_person_course_id": in_person_course.pk},
                url_params={"course_id": course.pk, "in_person_course_id": in_person_course.pk},
            )
            return Response(
                {"checkout_url": session["url"], "session_id": session["id"], "booking_id": booking.pk},
                status=status.HTTP_200_OK,
            )

        booking = InPersonCourseBooking.objects.create(
            user=request.user,
            in_person_course=in_person_course,
            payment_method=payment_method,
        )
        logger.info(
            "Created %s booking %s for in-person course %s (user=%s)",
            payment_method,
            booking.pk,
            in_person_course.pk,
            request.user.pk,
        )
        return Response(
            {
                "detail": _("Booking created, please complete the payment."),
                "booking": InPersonCourseBookingSerializer(booking, context={"request": request}).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request):
        return self._verify(request, services.IN_PERSON_COURSE, InPersonCourseBookingSerializer)

    @action(detail=False, methods=["get"], url_path="bookings/user")
    def user_bookings(self, request):
        bookings = InPersonCourseBooking.objects.filter(user=request.user).select_related(
            "in_person_course__course"
        )
        serializer = InPersonCourseBookingSerializer(bookings, many=True, context={"request": request})
        return Response(serializer.data)

    @action(detail=False, methods=["delete"], url_path="cleanup-expired")
    def cleanup_expired(self, request):
        results = services.expire_stale_bookings(booking_types=[services.IN_PERSON_COURSE])
        cancelled = results[services.IN_PERSON_COURSE]
        return Response(
            {"detail": _("Expired bookings cleaned up."), "cancelled": cancelled},
            status=status.HTTP_200_OK,
        )
