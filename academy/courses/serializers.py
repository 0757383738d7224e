"""
Academy Course Serializers

Serializers:
- CourseFileSerializer: Uploaded course material
- CourseSerializer: Generic catalog entry (any course type)
- RecordedCourseSerializer: Recorded course with its files
- InPersonCourseSerializer: In-person course with flattened course fields
- RecordedCourseBookingSerializer / InPersonCourseBookingSerializer
- Request serializers for the booking endpoints
"""

from decimal import Decimal

from django.db import transaction
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from academy.payments.models import PaidBooking
from .models import (
    Course,
    CourseFile,
    InPersonCourse,
    InPersonCourseBooking,
    RecordedCourseBooking,
)


class CourseFileSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = CourseFile
        fields = ("id", "file_name", "file_type", "url", "uploaded_at")
        read_only_fields = fields

    def get_url(self, obj) -> str:
        if not obj.file:
            return ""
        request = self.context.get("request")
        url = obj.file.url
        return request.build_absolute_uri(url) if request else url


class InPersonScheduleSerializer(serializers.ModelSerializer):
    class Meta:
        model = InPersonCourse
        fields = ("id", "start_date", "end_date", "location")
        read_only_fields = fields


class CourseSerializer(serializers.ModelSerializer):
    """Read representation used by the generic `/api/courses/` endpoints."""

    files_count = serializers.SerializerMethodField()
    in_person = InPersonScheduleSerializer(read_only=True)

    class Meta:
        model = Course
        fields = (
            "id", "title", "description", "image", "duration", "price",
            "course_type", "files_count", "in_person", "created_at", "updated_at",
        )
        read_only_fields = fields

    def get_files_count(self, obj) -> int:
        return obj.files.count()


class RecordedCourseSerializer(serializers.ModelSerializer):
    """
    Recorded course. Uploaded files arrive as multipart `files` entries and
    are passed in by the view through `save(files=[...])`.
    """

    files = CourseFileSerializer(many=True, read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))

    class Meta:
        model = Course
        fields = (
            "id", "title", "description", "image", "duration", "price",
            "course_type", "files", "created_at", "updated_at",
        )
        read_only_fields = ("id", "course_type", "files", "created_at", "updated_at")

    def _attach_files(self, course, files):
        for upload in files or []:
            CourseFile.objects.create(
                course=course,
                file=upload,
                file_name=upload.name,
                file_type=getattr(upload, "content_type", "") or "",
            )

    @transaction.atomic
    def create(self, validated_data):
        files = validated_data.pop("files", None)
        course = Course.objects.create(course_type=Course.CourseType.RECORDED, **validated_data)
        self._attach_files(course, files)
        return course

    @transaction.atomic
    def update(self, instance, validated_data):
        files = validated_data.pop("files", None)
        course = super().update(instance, validated_data)
        self._attach_files(course, files)
        return course


class InPersonCourseSerializer(serializers.ModelSerializer):
    """
    In-person course. Catalog fields (title, price, ...) are stored on the
    related Course and exposed flat, so clients create both in one request.
    """

    course_id = serializers.IntegerField(source="course.id", read_only=True)
    title = serializers.CharField(source="course.title", max_length=200)
    description = serializers.CharField(source="course.description", required=False, allow_blank=True)
    image = serializers.URLField(source="course.image", required=False, allow_blank=True, max_length=500)
    duration = serializers.IntegerField(source="course.duration", required=False, min_value=0)
    price = serializers.DecimalField(
        source="course.price", max_digits=10, decimal_places=2, min_value=Decimal("0")
    )

    class Meta:
        model = InPersonCourse
        fields = (
            "id", "course_id", "title", "description", "image", "duration", "price",
            "start_date", "end_date", "location", "created_at", "updated_at",
        )
        read_only_fields = ("id", "course_id", "created_at", "updated_at")

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": _("End date must not be before start date.")})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        course_data = validated_data.pop("course")
        course = Course.objects.create(course_type=Course.CourseType.IN_PERSON, **course_data)
        return InPersonCourse.objects.create(course=course, **validated_data)

    @transaction.atomic
    def update(self, instance, validated_data):
        course_data = validated_data.pop("course", {})
        if course_data:
            for attr, value in course_data.items():
                setattr(instance.course, attr, value)
            instance.course.save()
        return super().update(instance, validated_data)


class RecordedCourseBookingSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = RecordedCourseBooking
        fields = (
            "id", "course", "course_title", "payment_method", "payment_status",
            "status", "stripe_session_id", "paid_at", "created_at",
        )
        read_only_fields = fields


class InPersonCourseBookingSerializer(serializers.ModelSerializer):
    in_person_course = InPersonCourseSerializer(read_only=True)

    class Meta:
        model = InPersonCourseBooking
        fields = (
            "id", "in_person_course", "payment_method", "payment_status", "status",
            "stripe_session_id", "expires_at", "paid_at", "created_at",
        )
        read_only_fields = fields


class RecordedCourseBookRequestSerializer(serializers.Serializer):
    course_id = serializers.IntegerField(min_value=1)


class InPersonCourseBookRequestSerializer(serializers.Serializer):
    OFFLINE_METHODS = (PaidBooking.PaymentMethod.CASH, PaidBooking.PaymentMethod.EXTERNAL)

    in_person_course_id = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(
        choices=[PaidBooking.PaymentMethod.STRIPE, *OFFLINE_METHODS],
        error_messages={"invalid_choice": _("Invalid payment method.")},
    )
