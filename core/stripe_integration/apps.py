"""
Stripe Integration AppConfig
============================

Registers `core.stripe_integration` with Django and imports the signal
handlers at startup so that the `post_save` receiver on
`djstripe.models.Event` is connected exactly once per process
(runserver, gunicorn worker, management command).

Keep side effects in `ready()` minimal: no DB or network calls here.
"""

from django.apps import AppConfig


class StripeIntegrationConfig(AppConfig):
    """
    App configuration for the `core.stripe_integration` package.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "core.stripe_integration"
    verbose_name = "Stripe Integration"

    def ready(self):
        # Import signals so Django registers the post_save handler for dj-stripe Event
        from . import signals  # noqa: F401
