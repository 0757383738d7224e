"""
Cleanup Expired Bookings Management Command

Cancels pending stripe bookings whose checkout window has passed
(payment_status=failed, status=cancelled). Meant to run periodically
(cron, scheduler) as a safety net for missed `checkout.session.expired`
webhooks.
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from academy.payments.services import BOOKING_MODELS, expire_stale_bookings

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Cancels pending stripe bookings whose checkout session has expired."

    def add_arguments(self, parser):
        parser.add_argument(
            "--type",
            dest="booking_types",
            action="append",
            choices=sorted(BOOKING_MODELS),
            help="Restrict cleanup to a booking type (repeatable).",
        )

    def handle(self, *args, **options):
        try:
            results = expire_stale_bookings(booking_types=options.get("booking_types"))
        except DatabaseError as e:
            logger.error(f"Error while running cleanup_expired_bookings: {e}", exc_info=True)
            raise CommandError(f"An error occurred: {e}")

        total = sum(results.values())
        for booking_type, count in results.items():
            self.stdout.write(f"  - {booking_type}: {count}")

        if total == 0:
            self.stdout.write(self.style.SUCCESS("No expired bookings found."))
        else:
            self.stdout.write(self.style.SUCCESS(f"{total} booking(s) cancelled."))
