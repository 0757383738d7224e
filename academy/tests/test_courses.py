import shutil
import tempfile
from datetime import timedelta
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.utils import timezone
from rest_framework import status

from academy.models import Course, CourseFile, InPersonCourse, InPersonCourseBooking, RecordedCourseBooking
from .utils import (
    AcademyAPITestCase,
    checkout_session,
    make_admin,
    make_user,
    stripe_create,
    stripe_retrieve,
)

MEDIA_ROOT = tempfile.mkdtemp()


def make_in_person_course(title="Django Bootcamp", price="300.00", days=7):
    course = Course.objects.create(
        title=title, price=Decimal(price), course_type=Course.CourseType.IN_PERSON
    )
    start = timezone.now() + timedelta(days=days)
    return InPersonCourse.objects.create(
        course=course, start_date=start, end_date=start + timedelta(days=2), location="Hamburg"
    )


class CourseCatalogTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.recorded = Course.objects.create(
            title="Python Basics", price=Decimal("49.99"), course_type=Course.CourseType.RECORDED
        )
        cls.in_person = make_in_person_course()

    def test_list_all_courses(self):
        response = self.client.get("/api/courses/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_filter_by_type(self):
        response = self.client.get("/api/courses/", {"type": "in_person"})

        self.assertEqual([c["id"] for c in response.data], [self.in_person.course_id])
        self.assertEqual(response.data[0]["in_person"]["location"], "Hamburg")

    def test_course_detail(self):
        response = self.client.get(f"/api/courses/{self.recorded.pk}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["files_count"], 0)
        self.assertIsNone(response.data["in_person"])


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class RecordedCourseAdminTests(AcademyAPITestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        super().setUp()
        self.admin = make_admin()
        self.client.force_authenticate(self.admin)

    def test_create_with_files(self):
        response = self.client.post(
            "/api/recorded-courses/",
            {
                "title": "Data Analysis",
                "description": "Pandas from scratch",
                "duration": 12,
                "price": "99.00",
                "files": [
                    SimpleUploadedFile("intro.pdf", b"%PDF-1.4", content_type="application/pdf"),
                    SimpleUploadedFile("notes.txt", b"notes", content_type="text/plain"),
                ],
            },
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        course = Course.objects.get(pk=response.data["id"])
        self.assertEqual(course.course_type, "recorded")
        self.assertEqual(
            sorted(course.files.values_list("file_name", flat=True)), ["intro.pdf", "notes.txt"]
        )
        self.assertEqual(len(response.data["files"]), 2)

    def test_update_keeps_existing_files(self):
        course = Course.objects.create(
            title="Old", price=Decimal("10.00"), course_type=Course.CourseType.RECORDED
        )
        CourseFile.objects.create(
            course=course, file=SimpleUploadedFile("a.txt", b"a"), file_name="a.txt"
        )

        response = self.client.patch(
            f"/api/recorded-courses/{course.pk}/",
            {"title": "New", "files": [SimpleUploadedFile("b.txt", b"b")]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "New")
        self.assertEqual(course.files.count(), 2)

    def test_delete_removes_course(self):
        course = Course.objects.create(
            title="Gone", price=Decimal("10.00"), course_type=Course.CourseType.RECORDED
        )

        response = self.client.delete(f"/api/recorded-courses/{course.pk}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Course.objects.filter(pk=course.pk).exists())

    def test_regular_user_cannot_create(self):
        self.client.force_authenticate(make_user())

        response = self.client.post(
            "/api/recorded-courses/", {"title": "Nope", "price": "1.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class RecordedCoursePurchaseTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.user = make_user()
        cls.course = Course.objects.create(
            title="Python Basics", price=Decimal("49.99"), course_type=Course.CourseType.RECORDED
        )

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.user)

    def test_book_requires_login(self):
        self.client.force_authenticate(None)

        response = self.client.post("/api/recorded-courses/book/", {"course_id": self.course.pk})

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_book_starts_checkout(self):
        with stripe_create("cs_recorded") as create:
            response = self.client.post(
                "/api/recorded-courses/book/", {"course_id": self.course.pk}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["session_id"], "cs_recorded")
        self.assertTrue(response.data["checkout_url"].startswith("https://checkout.stripe.com/"))
        booking = RecordedCourseBooking.objects.get(pk=response.data["booking_id"])
        self.assertTrue(booking.is_pending)
        self.assertEqual(create.call_args.kwargs["metadata"]["course_id"], str(self.course.pk))

    def test_book_unknown_course(self):
        response = self.client.post("/api/recorded-courses/book/", {"course_id": 999999}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cannot_buy_twice(self):
        booking = RecordedCourseBooking.objects.create(user=self.user, course=self.course)
        booking.mark_paid()

        response = self.client.post(
            "/api/recorded-courses/book/", {"course_id": self.course.pk}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_payment(self):
        booking = RecordedCourseBooking.objects.create(
            user=self.user, course=self.course, stripe_session_id="cs_verify"
        )
        session = checkout_session(
            "cs_verify",
            payment_status="paid",
            booking_type="recorded_course",
            user_id=self.user.pk,
            course_id=self.course.pk,
        )

        with stripe_retrieve(session):
            first = self.client.post(
                "/api/recorded-courses/verify-payment/", {"session_id": "cs_verify"}, format="json"
            )
            second = self.client.post(
                "/api/recorded-courses/verify-payment/", {"session_id": "cs_verify"}, format="json"
            )

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["detail"], "Payment verified successfully.")
        self.assertEqual(second.data["detail"], "Payment already verified.")
        booking.refresh_from_db()
        self.assertTrue(booking.is_paid)

    def test_verify_unpaid_session(self):
        RecordedCourseBooking.objects.create(user=self.user, course=self.course, stripe_session_id="cs_unpaid")
        session = checkout_session(
            "cs_unpaid", booking_type="recorded_course", user_id=self.user.pk
        )

        with stripe_retrieve(session):
            response = self.client.post(
                "/api/recorded-courses/verify-payment/", {"session_id": "cs_unpaid"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_session_of_other_user(self):
        session = checkout_session(
            "cs_foreign", payment_status="paid", booking_type="recorded_course", user_id=self.user.pk + 1000
        )

        with stripe_retrieve(session):
            response = self.client.post(
                "/api/recorded-courses/verify-payment/", {"session_id": "cs_foreign"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class InPersonCourseTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.user = make_user()
        cls.in_person = make_in_person_course()

    def test_admin_creates_course_and_schedule(self):
        self.client.force_authenticate(self.admin)
        start = timezone.now() + timedelta(days=10)

        response = self.client.post(
            "/api/in-person-courses/",
            {
                "title": "React Workshop",
                "description": "Two days of hooks",
                "price": "250.00",
                "duration": 16,
                "start_date": start.isoformat(),
                "end_date": (start + timedelta(days=1)).isoformat(),
                "location": "Munich",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        in_person = InPersonCourse.objects.get(pk=response.data["id"])
        self.assertEqual(in_person.course.title, "React Workshop")
        self.assertEqual(in_person.course.course_type, "in_person")

    def test_end_before_start_is_rejected(self):
        self.client.force_authenticate(self.admin)
        start = timezone.now() + timedelta(days=10)

        response = self.client.post(
            "/api/in-person-courses/",
            {
                "title": "Backwards",
                "price": "10.00",
                "start_date": start.isoformat(),
                "end_date": (start - timedelta(days=1)).isoformat(),
                "location": "Munich",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", response.data)

    def test_update_course_fields(self):
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            f"/api/in-person-courses/{self.in_person.pk}/", {"price": "320.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.in_person.course.refresh_from_db()
        self.assertEqual(self.in_person.course.price, Decimal("320.00"))

    def test_delete_removes_catalog_entry(self):
        self.client.force_authenticate(self.admin)
        course_id = self.in_person.course_id

        response = self.client.delete(f"/api/in-person-courses/{self.in_person.pk}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Course.objects.filter(pk=course_id).exists())

    def test_stripe_checkout(self):
        self.client.force_authenticate(self.user)

        with stripe_create("cs_in_person"):
            response = self.client.post(
                "/api/in-person-courses/checkout-session/",
                {"in_person_course_id": self.in_person.pk, "payment_method": "stripe"},
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        booking = InPersonCourseBooking.objects.get(pk=response.data["booking_id"])
        self.assertEqual(booking.stripe_session_id, "cs_in_person")

    def test_cash_booking(self):
        self.client.force_authenticate(self.user)

        response = self.client.post(
            "/api/in-person-courses/checkout-session/",
            {"in_person_course_id": self.in_person.pk, "payment_method": "cash"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking = InPersonCourseBooking.objects.get(user=self.user)
        self.assertEqual(booking.payment_method, "cash")
        self.assertIsNone(booking.stripe_session_id)
        self.assertTrue(booking.is_pending)

    def test_invalid_payment_method(self):
        self.client.force_authenticate(self.user)

        response = self.client.post(
            "/api/in-person-courses/checkout-session/",
            {"in_person_course_id": self.in_person.pk, "payment_method": "bitcoin"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_verify_payment(self):
        self.client.force_authenticate(self.user)
        InPersonCourseBooking.objects.create(
            user=self.user, in_person_course=self.in_person, stripe_session_id="cs_ip_verify"
        )
        session = checkout_session(
            "cs_ip_verify", payment_status="paid", booking_type="in_person_course", user_id=self.user.pk
        )

        with stripe_retrieve(session):
            response = self.client.post(
                "/api/in-person-courses/verify-payment/", {"session_id": "cs_ip_verify"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["booking"]["payment_status"], "paid")
        self.assertEqual(response.data["booking"]["status"], "confirmed")

    def test_user_bookings(self):
        other = make_user(email="other@example.com")
        InPersonCourseBooking.objects.create(user=self.user, in_person_course=self.in_person, payment_method="cash")
        InPersonCourseBooking.objects.create(user=other, in_person_course=self.in_person, payment_method="cash")
        self.client.force_authenticate(self.user)

        response = self.client.get("/api/in-person-courses/bookings/user/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["in_person_course"]["location"], "Hamburg")

    def test_cleanup_expired_is_admin_only(self):
        self.client.force_authenticate(self.user)

        response = self.client.delete("/api/in-person-courses/cleanup-expired/")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cleanup_expired(self):
        stale = InPersonCourseBooking.objects.create(
            user=self.user,
            in_person_course=self.in_person,
            stripe_session_id="cs_stale",
            expires_at=timezone.now() - timedelta(minutes=5),
        )
        self.client.force_authenticate(self.admin)

        response = self.client.delete("/api/in-person-courses/cleanup-expired/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["cancelled"], 1)
        stale.refresh_from_db()
        self.assertEqual(stale.status, "cancelled")
