"""
Root URL configuration for the academy backend.

- /admin/           Django admin (jazzmin theme)
- /api/             academy REST API (auth, users, catalog, bookings, content)
- /api/payments/    Stripe helpers (publishable key)
- /stripe/          dj-stripe webhook receiver (signature verified, events persisted)
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("academy.urls")),
    path("api/payments/", include("core.stripe_integration.urls")),
    path("stripe/", include("djstripe.urls", namespace="djstripe")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
