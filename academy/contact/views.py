"""
Academy Contact View

POST /api/contact/ sends two HTML emails rendered from templates:
- a notification to CONTACT_RECIPIENT_EMAIL (reply-to set to the sender)
- a confirmation to the sender

Returns 500 when the notification cannot be delivered.
"""

import logging

from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from academy.mailing import send_templated_email
from .serializers import ContactFormSerializer

logger = logging.getLogger(__name__)


class ContactFormView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ContactFormSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        context = dict(serializer.validated_data)

        notified = send_templated_email(
            subject=f"New contact message: {context['subject']}",
            template_name="academy/emails/contact_notification.html",
            context=context,
            to=[settings.CONTACT_RECIPIENT_EMAIL],
            reply_to=[context["email"]],
        )
        if not notified:
            return Response(
                {"detail": _("Failed to send your message. Please try again later.")},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        confirmed = send_templated_email(
            subject="Thank you for contacting us",
            template_name="academy/emails/contact_confirmation.html",
            context=context,
            to=[context["email"]],
        )
        if not confirmed:
            logger.warning("Contact confirmation to %s could not be sent", context["email"])

        return Response(
            {"detail": _("Your message has been sent successfully.")},
            status=status.HTTP_200_OK,
        )
