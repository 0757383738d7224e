from rest_framework import status

from academy.models import FAQ, Podcast
from .utils import AcademyAPITestCase, make_admin, make_user


class FAQTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.first = FAQ.objects.create(
            question="How do I book a course?", answer="Pick a course and pay online.", display_order=1
        )
        cls.second = FAQ.objects.create(
            question="Can I get a refund?", answer="Contact us within 14 days.", display_order=2
        )
        cls.hidden = FAQ.objects.create(
            question="Internal question", answer="Not visible to the public.", is_active=False
        )

    def test_public_list_is_paginated_and_active_only(self):
        response = self.client.get("/api/faqs/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([f["id"] for f in response.data["results"]], [self.first.pk, self.second.pk])
        self.assertEqual(response.data["pagination"], {"page": 1, "limit": 10, "total": 2, "pages": 1})

    def test_pagination_and_sorting(self):
        response = self.client.get("/api/faqs/", {"limit": 1, "page": 2, "sort_by": "display_order", "sort_order": "desc"})

        self.assertEqual([f["id"] for f in response.data["results"]], [self.first.pk])
        self.assertEqual(response.data["pagination"]["pages"], 2)

    def test_search(self):
        response = self.client.get("/api/faqs/", {"search": "refund"})

        self.assertEqual([f["id"] for f in response.data["results"]], [self.second.pk])

    def test_invalid_query_parameters(self):
        response = self.client.get("/api/faqs/", {"limit": 500, "sort_by": "answer", "search": "a"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        for field in ("limit", "sort_by", "search"):
            self.assertIn(field, response.data)

    def test_inactive_item_is_hidden_from_public(self):
        response = self.client.get(f"/api/faqs/{self.hidden.pk}/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_list_includes_inactive(self):
        self.client.force_authenticate(self.admin)

        default = self.client.get("/api/faqs/admin/all/")
        everything = self.client.get("/api/faqs/admin/all/", {"include_inactive": "true"})

        self.assertEqual(default.data["pagination"]["total"], 2)
        self.assertEqual(everything.data["pagination"]["total"], 3)

    def test_admin_list_is_admin_only(self):
        self.client.force_authenticate(make_user())

        response = self.client.get("/api/faqs/admin/all/")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_faq(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            "/api/faqs/",
            {"question": "Where are you located?", "answer": "In the heart of Berlin."},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(FAQ.objects.get(pk=response.data["id"]).created_by, self.admin)

    def test_create_validation(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post("/api/faqs/", {"question": "Hi", "answer": "Short"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("question", response.data)
        self.assertIn("answer", response.data)

    def test_put_is_partial(self):
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            f"/api/faqs/{self.first.pk}/", {"display_order": 5}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertEqual(self.first.display_order, 5)
        self.assertEqual(self.first.question, "How do I book a course?")

    def test_empty_update_is_rejected(self):
        self.client.force_authenticate(self.admin)

        response = self.client.patch(f"/api/faqs/{self.first.pk}/", {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_status(self):
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            f"/api/faqs/{self.hidden.pk}/toggle-status/", {"is_active": True}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_active"])
        self.hidden.refresh_from_db()
        self.assertTrue(self.hidden.is_active)

    def test_toggle_status_without_body_flips_flag(self):
        self.client.force_authenticate(self.admin)

        off = self.client.patch(f"/api/faqs/{self.first.pk}/toggle-status/")
        on = self.client.patch(f"/api/faqs/{self.first.pk}/toggle-status/")

        self.assertEqual(off.status_code, status.HTTP_200_OK)
        self.assertFalse(off.data["is_active"])
        self.assertTrue(on.data["is_active"])
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_active)

    def test_delete(self):
        self.client.force_authenticate(self.admin)

        response = self.client.delete(f"/api/faqs/{self.second.pk}/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(FAQ.objects.filter(pk=self.second.pk).exists())

    def test_anonymous_cannot_write(self):
        response = self.client.post("/api/faqs/", {"question": "Anyone?", "answer": "Nobody home."}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PodcastTests(AcademyAPITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.tech = Podcast.objects.create(
            title="Scaling Django",
            youtube_url="https://www.youtube.com/watch?v=abc123",
            image_url="https://img.example.com/django.png",
            category="Tech",
        )
        cls.career = Podcast.objects.create(
            title="Landing a first job",
            youtube_url="https://youtu.be/xyz789",
            image_url="https://img.example.com/job.jpg",
            category="Career",
        )
        Podcast.objects.create(
            title="Draft episode",
            youtube_url="https://youtu.be/draft",
            image_url="https://img.example.com/draft.jpg",
            category="Drafts",
            is_active=False,
        )

    def test_filter_by_category(self):
        response = self.client.get("/api/podcasts/", {"category": "tech"})

        self.assertEqual([p["id"] for p in response.data["results"]], [self.tech.pk])

    def test_category_all(self):
        response = self.client.get("/api/podcasts/", {"category": "all"})

        self.assertEqual(response.data["pagination"]["total"], 2)

    def test_categories_of_active_podcasts(self):
        response = self.client.get("/api/podcasts/categories/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"categories": ["Career", "Tech"]})

    def test_toggle_status_without_body_flips_flag(self):
        self.client.force_authenticate(self.admin)

        response = self.client.patch(f"/api/podcasts/{self.tech.pk}/toggle-status/", format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["is_active"])
        self.tech.refresh_from_db()
        self.assertFalse(self.tech.is_active)

    def test_invalid_urls_are_rejected(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            "/api/podcasts/",
            {
                "title": "Bad links",
                "youtube_url": "https://vimeo.com/12345",
                "image_url": "https://img.example.com/cover.bmp",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("youtube_url", response.data)
        self.assertIn("image_url", response.data)

    def test_admin_creates_podcast(self):
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            "/api/podcasts/",
            {
                "title": "Testing in Python",
                "youtube_url": "https://www.youtube.com/watch?v=t3st",
                "image_url": "https://img.example.com/testing.webp",
                "category": "Tech",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["is_active"])
