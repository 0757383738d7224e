"""
Academy Application URL Configuration

URL routing for the marketplace API. Each functional area has its own URL
namespace; ViewSets are registered on SimpleRouters.

URL Structure (mounted under /api/):
- auth/:            Registration, cookie JWT login/refresh/logout, password reset
- users/:           Self service (me/) and user administration
- courses/:         Public catalog of all courses
- recorded-courses/, in-person-courses/: Course CRUD, booking and verification
- consultations/:   Slots, booking, Stripe checkout and payment history
- events/:          Events and paid registration
- faqs/, podcasts/: Admin curated content
- contact/:         Contact form
- user-content/:    Everything the current user has paid for
"""

from typing import List

from django.urls import URLPattern, include, path
from rest_framework.routers import SimpleRouter

from .consultations import views as consultation_views
from .contact import views as contact_views
from .content import views as content_views
from .courses import views as course_views
from .events import views as event_views
from .user_content import views as user_content_views
from .users import views as user_views

app_name = "academy"


def _create_users_router() -> SimpleRouter:
    """
    Create and configure the router for user administration endpoints.

    Returns:
        Configured SimpleRouter for list/retrieve/delete and statistics
    """
    router = SimpleRouter()
    router.register(r"", user_views.UserAdminViewSet, basename="users")
    return router


def _create_catalog_router() -> SimpleRouter:
    router = SimpleRouter()
    router.register(r"recorded-courses", course_views.RecordedCourseViewSet, basename="recorded-courses")
    router.register(r"in-person-courses", course_views.InPersonCourseViewSet, basename="in-person-courses")
    router.register(r"events", event_views.EventViewSet, basename="events")
    router.register(r"faqs", content_views.FAQViewSet, basename="faqs")
    router.register(r"podcasts", content_views.PodcastViewSet, basename="podcasts")
    return router


users_router = _create_users_router()
catalog_router = _create_catalog_router()

# --- Authentication URL Patterns ---

auth_urlpatterns: List[URLPattern] = [
    path("register/", user_views.RegisterView.as_view(), name="register"),
    path("login/", user_views.LoginView.as_view(), name="login"),
    path("refresh-token/", user_views.RefreshTokenView.as_view(), name="refresh-token"),
    path("logout/", user_views.LogoutView.as_view(), name="logout"),
    path("forgot-password/", user_views.ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password/", user_views.ResetPasswordView.as_view(), name="reset-password"),
]

# --- User URL Patterns ---

users_urlpatterns: List[URLPattern] = [
    # Self service (must precede the router's <pk>/ route)
    path("me/", user_views.CurrentUserView.as_view(), name="me"),
    path("me/password/", user_views.ChangePasswordView.as_view(), name="change-password"),
    # Administration (requires admin privileges)
    path("", include(users_router.urls)),
]

# --- Consultation URL Patterns ---

consultations_urlpatterns: List[URLPattern] = [
    path("", consultation_views.ConsultationCreateView.as_view(), name="create"),
    path("available/", consultation_views.AvailableConsultationListView.as_view(), name="available"),
    path("book/<int:pk>/", consultation_views.BookConsultationView.as_view(), name="book"),
    path(
        "create-checkout-session/",
        consultation_views.ConsultationCheckoutView.as_view(),
        name="create-checkout-session",
    ),
    path("verify-payment/", consultation_views.ConsultationVerifyPaymentView.as_view(), name="verify-payment"),
    path("payments-history/", consultation_views.PaymentHistoryView.as_view(), name="payments-history"),
    path("all-payments/", consultation_views.AllPaymentsView.as_view(), name="all-payments"),
]

# --- Main URL Configuration ---

urlpatterns: List[URLPattern] = [
    path("auth/", include((auth_urlpatterns, "auth"))),
    path("users/", include((users_urlpatterns, "users"))),
    path("courses/", course_views.CourseListView.as_view(), name="course-list"),
    path("courses/<int:pk>/", course_views.CourseDetailView.as_view(), name="course-detail"),
    path("consultations/", include((consultations_urlpatterns, "consultations"))),
    path("contact/", contact_views.ContactFormView.as_view(), name="contact"),
    path("user-content/", user_content_views.UserContentView.as_view(), name="user-content"),
    path("", include(catalog_router.urls)),
]
