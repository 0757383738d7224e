"""
Academy Content Views

Views:
- FAQViewSet: /api/faqs/
- PodcastViewSet: /api/podcasts/ (+ /api/podcasts/categories/)

Both share ContentViewSet:
- GET    /                   public, active items only, paginated
- GET    /admin/all/         admin, `include_inactive=true` shows everything
- GET    /<id>/              public for active items, admins see all
- POST   /                   admin
- PUT/PATCH /<id>/           admin, partial update (at least one field)
- DELETE /<id>/              admin
- PATCH  /<id>/toggle-status/  admin, flips is_active (or sets `{"is_active": bool}`)

List response:
    {"results": [...], "pagination": {"page", "limit", "total", "pages"}}
"""

import logging
import math

from django.db.models import Q
from django.utils.translation import gettext_lazy as _
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from academy.permissions import IsAdminOrReadOnly
from .models import FAQ, Podcast
from .serializers import (
    ContentListQuerySerializer,
    FAQSerializer,
    PodcastSerializer,
    ToggleStatusSerializer,
)

logger = logging.getLogger(__name__)


class ContentViewSet(viewsets.ModelViewSet):
    """
    Shared behaviour of admin-curated content.

    Subclasses define `search_fields` (model fields searched with icontains)
    and `sort_fields` (public sort key → model field).
    """

    permission_classes = [IsAdminOrReadOnly]
    search_fields = ()
    sort_fields = {}
    supports_category = False

    def get_queryset(self):
        queryset = self.queryset.model.objects.all()
        user = self.request.user
        if self.action in ("list", "retrieve") and not (user and user.is_staff):
            queryset = queryset.filter(is_active=True)
        return queryset

    def get_permissions(self):
        if self.action == "admin_all":
            return [permissions.IsAdminUser()]
        return super().get_permissions()

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        logger.info("%s %s created by %s", instance._meta.verbose_name, instance.pk, self.request.user.pk)

    def update(self, request, *args, **kwargs):
        # PUT behaves like PATCH
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        logger.info("%s %s deleted by %s", instance._meta.verbose_name, instance.pk, request.user.pk)
        instance.delete()
        return Response({"detail": _("Deleted successfully.")}, status=status.HTTP_200_OK)

    # ---------- listing ----------

    def filter_for_query(self, queryset, query):
        search = query.get("search")
        if search and self.search_fields:
            condition = Q()
            for field in self.search_fields:
                condition |= Q(**{f"{field}__icontains": search})
            queryset = queryset.filter(condition)

        category = query.get("category")
        if self.supports_category and category and category != "all":
            queryset = queryset.filter(category__iexact=category)

        order_field = self.sort_fields[query["sort_by"]]
        prefix = "-" if query["sort_order"] == "desc" else ""
        return queryset.order_by(f"{prefix}{order_field}", "-created_at", "-id")

    def paginated_response(self, queryset, query):
        page, limit = query["page"], query["limit"]
        total = queryset.count()
        items = queryset[(page - 1) * limit: page * limit]
        return Response(
            {
                "results": self.get_serializer(items, many=True).data,
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "pages": math.ceil(total / limit) if total else 0,
                },
            }
        )

    def _list(self, request, active_only):
        params = ContentListQuerySerializer(
            data=request.query_params, context={"sort_fields": self.sort_fields}
        )
        params.is_valid(raise_exception=True)
        query = params.validated_data

        queryset = self.queryset.model.objects.all()
        if active_only or not query["include_inactive"]:
            queryset = queryset.filter(is_active=True)
        return self.paginated_response(self.filter_for_query(queryset, query), query)

    def list(self, request, *args, **kwargs):
        return self._list(request, active_only=True)

    @action(detail=False, methods=["get"], url_path="admin/all")
    def admin_all(self, request):
        return self._list(request, active_only=False)

    @action(detail=True, methods=["patch"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        instance = self.get_object()
        body = ToggleStatusSerializer(data=request.data, partial=True)
        body.is_valid(raise_exception=True)

        instance.is_active = body.validated_data.get("is_active", not instance.is_active)
        instance.save(update_fields=["is_active", "updated_at"])
        logger.info("%s %s is_active=%s", instance._meta.verbose_name, instance.pk, instance.is_active)
        return Response(self.get_serializer(instance).data, status=status.HTTP_200_OK)


class FAQViewSet(ContentViewSet):
    queryset = FAQ.objects.all()
    serializer_class = FAQSerializer
    search_fields = ("question", "answer")
    sort_fields = {
        "display_order": "display_order",
        "created_at": "created_at",
        "question": "question",
    }


class PodcastViewSet(ContentViewSet):
    queryset = Podcast.objects.all()
    serializer_class = PodcastSerializer
    search_fields = ("title", "description", "category")
    sort_fields = {
        "display_order": "display_order",
        "created_at": "created_at",
        "title": "title",
    }
    supports_category = True

    @action(detail=False, methods=["get"], url_path="categories", permission_classes=[permissions.AllowAny])
    def categories(self, request):
        categories = (
            Podcast.objects.filter(is_active=True)
            .exclude(category="")
            .order_by("category")
            .values_list("category", flat=True)
            .distinct()
        )
        return Response({"categories": list(categories)})
