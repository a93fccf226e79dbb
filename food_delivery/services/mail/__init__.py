"""
Mail Service Factory

Returns the Mock or SendGrid mail service based on ENV_MODE.
"""

import logging
from functools import lru_cache

from food_delivery.core.config import get_settings
from food_delivery.services.mail.base import BaseMailService
from food_delivery.services.mail.mock import MockMailService
from food_delivery.services.mail.sendgrid import SendGridMailService

logger = logging.getLogger(__name__)


@lru_cache()
def get_mail_service() -> BaseMailService:
    """Get the configured mail service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Mail Service: Using MockMailService (development mode)")
        return MockMailService(
            failure_rate=settings.mock_failure_rate,
            max_latency=settings.mock_latency,
        )
    else:
        logger.info(f"Mail Service: Using SendGridMailService ({settings.env_mode.value} mode)")
        return SendGridMailService()


__all__ = [
    "get_mail_service",
    "BaseMailService",
    "MockMailService",
    "SendGridMailService",
]
