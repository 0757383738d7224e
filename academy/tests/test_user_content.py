from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status

from academy.models import (
    Consultation,
    ConsultationBooking,
    Course,
    CourseFile,
    InPersonCourse,
    InPersonCourseBooking,
    RecordedCourseBooking,
)
from .utils import AcademyAPITestCase, make_user


class UserContentTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.other = make_user(email="other@example.com")
        now = timezone.now()

        recorded = Course.objects.create(
            title="Python Basics", price=Decimal("49.99"), course_type=Course.CourseType.RECORDED
        )
        CourseFile.objects.create(course=recorded, file="course_files/1/a.pdf", file_name="a.pdf")
        CourseFile.objects.create(course=recorded, file="course_files/1/b.pdf", file_name="b.pdf")
        workshop = InPersonCourse.objects.create(
            course=Course.objects.create(
                title="Django Bootcamp", price=Decimal("300.00"), course_type=Course.CourseType.IN_PERSON
            ),
            start_date=now + timedelta(days=7),
            end_date=now + timedelta(days=9),
            location="Hamburg",
        )
        slot = Consultation.objects.create(
            consultation_type="Career coaching", scheduled_at=now + timedelta(days=1), price=Decimal("80.00")
        )

        cls.recorded_booking = RecordedCourseBooking.objects.create(user=cls.user, course=recorded)
        cls.recorded_booking.mark_paid(when=now - timedelta(days=3))
        cls.workshop_booking = InPersonCourseBooking.objects.create(user=cls.user, in_person_course=workshop)
        cls.workshop_booking.mark_paid(when=now - timedelta(days=2))
        cls.consultation_booking = ConsultationBooking.objects.create(user=cls.user, consultation=slot)
        cls.consultation_booking.mark_paid(when=now - timedelta(days=1))

        # not listed: unpaid, or someone else's
        InPersonCourseBooking.objects.create(user=cls.user, in_person_course=workshop, payment_method="cash")
        RecordedCourseBooking.objects.create(user=cls.other, course=recorded).mark_paid()

    def test_requires_login(self):
        response = self.client.get("/api/user-content/")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_lists_paid_content_newest_first(self):
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/user-content/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["stats"],
            {"total_items": 3, "recorded_courses": 1, "in_person_courses": 1, "consultations": 1},
        )
        results = response.data["results"]
        self.assertEqual(
            [item["content_type"] for item in results],
            ["consultation", "in_person_course", "recorded_course"],
        )
        self.assertEqual(results[1]["location"], "Hamburg")
        self.assertEqual(results[2]["files_count"], 2)
        self.assertEqual(results[2]["title"], "Python Basics")

    def test_empty_for_new_user(self):
        self.client.force_authenticate(make_user(email="new@example.com"))

        response = self.client.get("/api/user-content/")

        self.assertEqual(response.data["stats"]["total_items"], 0)
        self.assertEqual(response.data["results"], [])
