"""
Academy Course Models

Catalog of courses and their bookings.

Models:
- Course: Shared catalog entry (recorded or in-person)
- CourseFile: Uploaded material of a recorded course
- InPersonCourse: Schedule and location of an in-person course
- RecordedCourseBooking: Purchase of a recorded course
- InPersonCourseBooking: Seat booking of an in-person course
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from academy.payments.models import PaidBooking

__all__ = [
    "Course",
    "CourseFile",
    "InPersonCourse",
    "RecordedCourseBooking",
    "InPersonCourseBooking",
]


class Course(models.Model):
    class CourseType(models.TextChoices):
        RECORDED = "recorded", _("Recorded")
        IN_PERSON = "in_person", _("In Person")

    title = models.CharField(max_length=200, verbose_name=_("Title"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    image = models.URLField(max_length=500, blank=True, verbose_name=_("Image URL"))
    duration = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Duration"),
        help_text=_("Total duration in hours"),
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        verbose_name=_("Price"),
    )
    course_type = models.CharField(
        max_length=20,
        choices=CourseType.choices,
        db_index=True,
        verbose_name=_("Course Type"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Course")
        verbose_name_plural = _("Courses")

    def __str__(self) -> str:
        return f"{self.title} ({self.get_course_type_display()})"


def course_file_upload_to(instance, filename: str) -> str:
    return f"course_files/{instance.course_id}/{filename}"


class CourseFile(models.Model):
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="files",
        verbose_name=_("Course"),
    )
    file = models.FileField(upload_to=course_file_upload_to, verbose_name=_("File"))
    file_name = models.CharField(max_length=255, verbose_name=_("File Name"))
    file_type = models.CharField(max_length=100, blank=True, verbose_name=_("File Type"))
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["uploaded_at", "id"]
        verbose_name = _("Course File")
        verbose_name_plural = _("Course Files")

    def __str__(self) -> str:
        return self.file_name


class InPersonCourse(models.Model):
    course = models.OneToOneField(
        Course,
        on_delete=models.CASCADE,
        related_name="in_person",
        verbose_name=_("Course"),
    )
    start_date = models.DateTimeField(verbose_name=_("Start Date"))
    end_date = models.DateTimeField(verbose_name=_("End Date"))
    location = models.CharField(max_length=255, verbose_name=_("Location"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]
        verbose_name = _("In-Person Course")
        verbose_name_plural = _("In-Person Courses")

    def __str__(self) -> str:
        return f"{self.course.title} @ {self.location} ({self.start_date:%Y-%m-%d})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": _("End date must not be before start date.")})


class RecordedCourseBooking(PaidBooking):
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name="recorded_bookings",
        verbose_name=_("Course"),
    )

    class Meta(PaidBooking.Meta):
        verbose_name = _("Recorded Course Booking")
        verbose_name_plural = _("Recorded Course Bookings")

    def __str__(self) -> str:
        return f"{self.user} → {self.course.title} ({self.payment_status})"


class InPersonCourseBooking(PaidBooking):
    in_person_course = models.ForeignKey(
        InPersonCourse,
        on_delete=models.CASCADE,
        related_name="bookings",
        verbose_name=_("In-Person Course"),
    )

    class Meta(PaidBooking.Meta):
        verbose_name = _("In-Person Course Booking")
        verbose_name_plural = _("In-Person Course Bookings")

    def __str__(self) -> str:
        return f"{self.user} → {self.in_person_course.course.title} ({self.payment_status})"
