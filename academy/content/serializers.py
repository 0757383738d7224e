"""
Academy Content Serializers

Serializers:
- FAQSerializer / PodcastSerializer: Create and update (partial) payloads
- ToggleStatusSerializer: optional `{"is_active": bool}`, flips the flag when absent
- ContentListQuerySerializer: page, limit, search, sort_by, sort_order,
  include_inactive (and category for podcasts)
"""

from django.core.validators import RegexValidator
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from .models import FAQ, Podcast

YOUTUBE_URL_REGEX = r"^(https?:\/\/)?(www\.)?(youtube\.com\/(watch\?v=|embed\/|v\/)|youtu\.be\/)[\w-]+(&[\w=]*)?$"
IMAGE_URL_REGEX = r"(?i)^https?:\/\/.+\.(jpg|jpeg|png|gif|webp)(\?.*)?$"

youtube_url_validator = RegexValidator(YOUTUBE_URL_REGEX, _("Invalid YouTube URL."))
image_url_validator = RegexValidator(IMAGE_URL_REGEX, _("Invalid image URL."))


class AtLeastOneFieldMixin:
    def validate(self, attrs):
        if self.instance is not None and not attrs:
            raise serializers.ValidationError(_("At least one field must be provided for the update."))
        return super().validate(attrs)


class FAQSerializer(AtLeastOneFieldMixin, serializers.ModelSerializer):
    question = serializers.CharField(min_length=3, max_length=500)
    answer = serializers.CharField(min_length=10, max_length=2000)
    display_order = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = FAQ
        fields = ("id", "question", "answer", "is_active", "display_order", "created_by", "created_at", "updated_at")
        read_only_fields = ("id", "created_by", "created_at", "updated_at")


class PodcastSerializer(AtLeastOneFieldMixin, serializers.ModelSerializer):
    title = serializers.CharField(min_length=3, max_length=200)
    youtube_url = serializers.URLField(max_length=500, validators=[youtube_url_validator])
    image_url = serializers.URLField(max_length=500, validators=[image_url_validator])
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    display_order = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = Podcast
        fields = (
            "id", "title", "youtube_url", "image_url", "description", "category",
            "is_active", "display_order", "created_by", "created_at", "updated_at",
        )
        read_only_fields = ("id", "created_by", "created_at", "updated_at")


class ToggleStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False)


class ContentListQuerySerializer(serializers.Serializer):
    """
    Validates list query parameters. `sort_fields` maps the public sort keys
    to model fields and is provided by the view.
    """

    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    search = serializers.CharField(min_length=2, required=False, trim_whitespace=True)
    sort_by = serializers.CharField(default="display_order")
    sort_order = serializers.ChoiceField(choices=["asc", "desc"], default="asc")
    include_inactive = serializers.BooleanField(default=False)
    category = serializers.CharField(max_length=100, required=False, trim_whitespace=True)

    def validate_sort_by(self, value: str) -> str:
        sort_fields = self.context.get("sort_fields", {})
        if value not in sort_fields:
            raise serializers.ValidationError(
                _("Must be one of: %(choices)s") % {"choices": ", ".join(sorted(sort_fields))}
            )
        return value
