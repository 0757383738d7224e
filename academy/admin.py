"""
Academy Django Admin Configuration

Admin interface for all academy models (jazzmin themed).

The admin interface is organized into logical sections:
- User Management: User administration with the profile inline
- Catalog: Courses with their files and in-person schedule, events
- Bookings: Course and consultation bookings, event registrations
- Content: FAQs and podcasts
"""

from typing import Optional

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from .models import (
    FAQ,
    Consultation,
    ConsultationBooking,
    Course,
    CourseFile,
    Event,
    EventRegistration,
    InPersonCourse,
    InPersonCourseBooking,
    Podcast,
    Profile,
    RecordedCourseBooking,
)

# --- User Management Administration ---


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("phone_number", "reset_code_expires_at")
    readonly_fields = ("reset_code_expires_at",)

    def get_extra(self, request: HttpRequest, obj: Optional[User] = None, **kwargs) -> int:
        """Profiles are created by signal, never through the inline."""
        return 0


class UserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)
    list_display = (
        "email",
        "first_name",
        "last_name",
        "get_phone_number",
        "is_staff",
        "is_active",
        "date_joined",
    )
    list_select_related = ("profile",)
    list_filter = ("is_staff", "is_superuser", "is_active", "date_joined")
    search_fields = ("username", "first_name", "last_name", "email", "profile__phone_number")
    ordering = ("-date_joined",)

    @admin.display(description=_("Phone Number"))
    def get_phone_number(self, instance: User) -> str:
        try:
            return instance.profile.phone_number
        except Profile.DoesNotExist:
            return ""

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("profile")


admin.site.unregister(User)
admin.site.register(User, UserAdmin)

# --- Catalog Administration ---


class CourseFileInline(admin.TabularInline):
    model = CourseFile
    extra = 0
    fields = ("file", "file_name", "file_type", "uploaded_at")
    readonly_fields = ("uploaded_at",)


class InPersonCourseInline(admin.StackedInline):
    model = InPersonCourse
    can_delete = False
    extra = 0
    fields = ("start_date", "end_date", "location")


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    inlines = (InPersonCourseInline, CourseFileInline)
    list_display = ["title", "course_type", "price", "duration", "created_at"]
    list_filter = ["course_type", "created_at"]
    search_fields = ["title", "description"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = (
        (_("Course"), {"fields": ("title", "description", "image", "course_type")}),
        (_("Pricing"), {"fields": ("price", "duration")}),
        (
            _("Timestamps"),
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "type", "date", "location", "price", "seats", "get_seats_left"]
    list_filter = ["type", "date"]
    search_fields = ["name", "description", "location"]
    ordering = ["-date"]
    readonly_fields = ["created_at", "updated_at"]

    @admin.display(description=_("Seats Left"))
    def get_seats_left(self, obj: Event) -> int:
        return obj.seats_left


# --- Booking Administration ---


class PaidBookingAdmin(admin.ModelAdmin):
    """Shared layout of the PaidBooking based models."""

    list_filter = ["payment_status", "status", "payment_method", "created_at"]
    search_fields = ["user__email", "stripe_session_id"]
    readonly_fields = ["stripe_session_id", "paid_at", "created_at", "updated_at"]
    list_select_related = True
    actions = ["mark_as_paid"]

    booking_fieldsets = (
        (_("Payment"), {"fields": ("payment_method", "payment_status", "status", "expires_at")}),
        (
            _("Stripe"),
            {
                "fields": ("stripe_session_id", "paid_at", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.action(description=_("Mark selected bookings as paid"))
    def mark_as_paid(self, request: HttpRequest, queryset: QuerySet) -> None:
        changed = sum(1 for booking in queryset if booking.mark_paid())
        self.message_user(request, _("%(count)d booking(s) marked as paid.") % {"count": changed})


@admin.register(RecordedCourseBooking)
class RecordedCourseBookingAdmin(PaidBookingAdmin):
    list_display = ["user", "course", "payment_method", "payment_status", "status", "paid_at"]
    fieldsets = ((_("Booking"), {"fields": ("user", "course")}),) + PaidBookingAdmin.booking_fieldsets


@admin.register(InPersonCourseBooking)
class InPersonCourseBookingAdmin(PaidBookingAdmin):
    list_display = ["user", "in_person_course", "payment_method", "payment_status", "status", "paid_at"]
    fieldsets = ((_("Booking"), {"fields": ("user", "in_person_course")}),) + PaidBookingAdmin.booking_fieldsets


@admin.register(ConsultationBooking)
class ConsultationBookingAdmin(PaidBookingAdmin):
    list_display = ["user", "consultation", "payment_method", "payment_status", "status", "paid_at"]
    fieldsets = ((_("Booking"), {"fields": ("user", "consultation")}),) + PaidBookingAdmin.booking_fieldsets


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ["consultation_type", "scheduled_at", "price", "status", "user", "payment_status"]
    list_filter = ["status", "payment_status", "payment_method"]
    search_fields = ["consultation_type", "user__email"]
    ordering = ["scheduled_at"]
    readonly_fields = ["booked_at", "created_at", "updated_at"]


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ["user", "event", "paid", "project_name", "created_at"]
    list_filter = ["paid", "event"]
    search_fields = ["user__email", "event__name", "project_name"]
    readonly_fields = ["stripe_session_id", "created_at"]


# --- Content Administration ---


@admin.register(FAQ)
class FAQAdmin(admin.ModelAdmin):
    list_display = ["question", "is_active", "display_order", "created_at"]
    list_filter = ["is_active"]
    list_editable = ["is_active", "display_order"]
    search_fields = ["question", "answer"]
    readonly_fields = ["created_by", "created_at", "updated_at"]


@admin.register(Podcast)
class PodcastAdmin(admin.ModelAdmin):
    list_display = ["title", "category", "is_active", "display_order", "created_at"]
    list_filter = ["is_active", "category"]
    list_editable = ["is_active", "display_order"]
    search_fields = ["title", "description", "category"]
    readonly_fields = ["created_by", "created_at", "updated_at"]
