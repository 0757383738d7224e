"""
Academy User Content View

GET /api/user-content/ lists the caller's paid recorded courses, in-person
courses and consultations, newest purchase first.

Response:
    {
        "stats": {"total_items", "recorded_courses", "in_person_courses", "consultations"},
        "results": [{"id", "content_type", "purchase_date", ...}, ...]
    }
"""

from django.db.models import Count
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.consultations.models import ConsultationBooking
from academy.courses.models import InPersonCourseBooking, RecordedCourseBooking


def _course_fields(course):
    return {
        "course_id": course.pk,
        "title": course.title,
        "description": course.description,
        "image": course.image,
        "duration": course.duration,
        "price": str(course.price),
    }


def _purchase_date(booking):
    return booking.paid_at or booking.created_at


class UserContentView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        user = request.user

        recorded = [
            {
                "id": booking.pk,
                "content_type": "recorded_course",
                "purchase_date": _purchase_date(booking),
                "files_count": booking.files_total,
                "has_access": True,
                **_course_fields(booking.course),
            }
            for booking in RecordedCourseBooking.objects.paid()
            .filter(user=user)
            .select_related("course")
            .annotate(files_total=Count("course__files"))
        ]

        in_person = [
            {
                "id": booking.pk,
                "content_type": "in_person_course",
                "purchase_date": _purchase_date(booking),
                "in_person_course_id": booking.in_person_course_id,
                "start_date": booking.in_person_course.start_date,
                "end_date": booking.in_person_course.end_date,
                "location": booking.in_person_course.location,
                "has_access": True,
                **_course_fields(booking.in_person_course.course),
            }
            for booking in InPersonCourseBooking.objects.paid()
            .filter(user=user)
            .select_related("in_person_course__course")
        ]

        consultations = [
            {
                "id": booking.pk,
                "content_type": "consultation",
                "purchase_date": _purchase_date(booking),
                "consultation_id": booking.consultation_id,
                "title": f"Consultation: {booking.consultation.consultation_type}",
                "scheduled_at": booking.consultation.scheduled_at,
                "price": str(booking.consultation.price),
                "has_access": True,
            }
            for booking in ConsultationBooking.objects.paid()
            .filter(user=user)
            .select_related("consultation")
        ]

        results = sorted(
            recorded + in_person + consultations,
            key=lambda item: item["purchase_date"],
            reverse=True,
        )
        stats = {
            "total_items": len(results),
            "recorded_courses": len(recorded),
            "in_person_courses": len(in_person),
            "consultations": len(consultations),
        }
        return Response({"stats": stats, "results": results})
