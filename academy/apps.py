"""
Academy Application Configuration

Defines the Django application configuration for the academy marketplace.
`ready()` connects the booking receivers to the Stripe webhook signals
emitted by `core.stripe_integration`.
"""

from django.apps import AppConfig


class AcademyConfig(AppConfig):
    """
    Configuration class for the academy Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "academy"
    verbose_name: str = "Academy"

    def ready(self) -> None:
        """
        Connect payment receivers once the app registry is loaded.

        Importing the module is enough; receivers are registered with
        `@receiver` and a dispatch_uid, so repeated calls are harmless.
        """
        super().ready()
        from .payments import receivers  # noqa: F401
