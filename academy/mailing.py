"""
Academy Email Services

Renders HTML emails from Django templates and sends them with a plain-text
alternative through the configured `EMAIL_BACKEND`.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


def send_templated_email(
    subject: str,
    template_name: str,
    context: Dict[str, Any],
    to: Iterable[str],
    reply_to: Optional[Iterable[str]] = None,
) -> bool:
    """
    Send an HTML email rendered from `template_name`.

    Returns:
        True when the backend accepted the message, False otherwise.
    """
    recipients = [address for address in to if address]
    html_body = render_to_string(template_name, context)
    message = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html_body),
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
        reply_to=list(reply_to) if reply_to else None,
    )
    message.attach_alternative(html_body, "text/html")

    try:
        message.send(fail_silently=False)
    except Exception as exc:
        logger.exception("Email sending error (%s to %s): %s", template_name, recipients, exc)
        return False

    logger.info("Sent %s to %s", template_name, recipients)
    return True
