"""
SendGrid Mail Service

Production implementation backed by SendGrid dynamic templates.
Template names used by the application map to template ids from settings.
"""

import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from food_delivery.core.config import get_settings
from food_delivery.services.mail.base import BaseMailService

logger = logging.getLogger(__name__)


class SendGridMailService(BaseMailService):
    """Production mail service using SendGrid."""

    def __init__(self):
        settings = get_settings()

        if settings.sendgrid_api_key:
            self.sendgrid_client = SendGridAPIClient(settings.sendgrid_api_key)
        else:
            self.sendgrid_client = None
            logger.warning("SendGrid credentials not configured")

        self.from_email = settings.sendgrid_from_email
        self.templates = {
            "verify_email": settings.sendgrid_verify_template_id,
        }

        logger.info("SendGridMailService initialized")

    @property
    def provider_name(self) -> str:
        return "sendgrid"

    async def send_mail(
        self,
        subject: str,
        to_email: str,
        template: str,
        variables: Optional[dict[str, str]] = None,
    ) -> bool:
        """Send a templated email via SendGrid."""
        if not self.sendgrid_client:
            logger.error("SendGrid not configured; dropping email")
            return False

        template_id = self.templates.get(template)
        if not template_id:
            logger.error(f"No SendGrid template configured for '{template}'")
            return False

        try:
            message = Mail(
                from_email=self.from_email,
                to_emails=to_email,
                subject=subject,
            )
            message.template_id = template_id
            message.dynamic_template_data = {"subject": subject, **(variables or {})}

            response = self.sendgrid_client.send(message)

            logger.info(f"Email sent to {to_email}: {response.status_code}")
            return response.status_code in (200, 201, 202)

        except Exception as e:
            logger.error(f"SendGrid error: {e}")
            return False

    async def health_check(self) -> bool:
        return self.sendgrid_client is not None
