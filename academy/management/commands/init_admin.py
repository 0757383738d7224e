"""
Init Admin Management Command

Creates the initial administrator account from the ADMIN_EMAIL and
ADMIN_PASSWORD settings. Safe to run on every deploy: an existing account
with that email is left untouched, and missing settings only produce a
warning.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

User = get_user_model()

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Creates the admin user from ADMIN_EMAIL / ADMIN_PASSWORD if it does not exist yet."

    def add_arguments(self, parser):
        parser.add_argument("--email", help="Overrides ADMIN_EMAIL")
        parser.add_argument("--password", help="Overrides ADMIN_PASSWORD")

    def handle(self, *args, **options):
        email = (options.get("email") or settings.ADMIN_EMAIL or "").strip().lower()
        password = options.get("password") or settings.ADMIN_PASSWORD

        if not email or not password:
            logger.warning("ADMIN_EMAIL or ADMIN_PASSWORD not set, skipping admin creation")
            self.stdout.write(
                self.style.WARNING("ADMIN_EMAIL / ADMIN_PASSWORD not set. Skipping.")
            )
            return

        try:
            if User.objects.filter(email__iexact=email).exists():
                self.stdout.write(f"Admin user {email} already exists.")
                return

            user = User.objects.create_superuser(
                username=email,
                email=email,
                password=password,
                first_name="Admin",
            )
        except DatabaseError as e:
            logger.error(f"Error while running init_admin: {e}", exc_info=True)
            raise CommandError(f"An error occurred: {e}")

        logger.info("Created admin user %s", user.pk)
        self.stdout.write(self.style.SUCCESS(f"Admin user {email} created."))
