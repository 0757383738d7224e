"""
Academy Content Models

Models:
- FAQ: Question/answer pair shown on the public FAQ page
- Podcast: YouTube hosted podcast episode with cover image and category

Both are ordered by `display_order` and hidden from the public while
`is_active` is False.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

__all__ = ["FAQ", "Podcast"]


class ContentBase(models.Model):
    is_active = models.BooleanField(default=True, db_index=True, verbose_name=_("Active"))
    display_order = models.PositiveIntegerField(default=0, verbose_name=_("Display Order"))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name=_("Created By"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["display_order", "-created_at"]


class FAQ(ContentBase):
    question = models.CharField(max_length=500, verbose_name=_("Question"))
    answer = models.TextField(max_length=2000, verbose_name=_("Answer"))

    class Meta(ContentBase.Meta):
        verbose_name = _("FAQ")
        verbose_name_plural = _("FAQs")

    def __str__(self) -> str:
        return self.question


class Podcast(ContentBase):
    title = models.CharField(max_length=200, verbose_name=_("Title"))
    youtube_url = models.URLField(max_length=500, verbose_name=_("YouTube URL"))
    image_url = models.URLField(max_length=500, verbose_name=_("Image URL"))
    description = models.TextField(max_length=1000, blank=True, verbose_name=_("Description"))
    category = models.CharField(max_length=100, blank=True, db_index=True, verbose_name=_("Category"))

    class Meta(ContentBase.Meta):
        verbose_name = _("Podcast")
        verbose_name_plural = _("Podcasts")

    def __str__(self) -> str:
        return self.title
