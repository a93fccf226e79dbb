"""
Payment Service Factory

Provides a single entry point for obtaining a payment service instance.

Environment Switching:
    - ENV_MODE=development → MockPaymentService (no API calls)
    - ENV_MODE=staging → StripePaymentService (test keys)
    - ENV_MODE=production → StripePaymentService (live keys)
"""

import logging
from functools import lru_cache

from food_delivery.core.config import get_settings
from food_delivery.services.payment.base import (
    BasePaymentService,
    PaymentResult,
)
from food_delivery.services.payment.mock import MockPaymentService
from food_delivery.services.payment.stripe import StripePaymentService

logger = logging.getLogger(__name__)


@lru_cache()
def get_payment_service() -> BasePaymentService:
    """
    Get the configured payment service instance.

    The instance is cached so every request shares one provider client.

    Raises:
        ValueError: If production mode but Stripe key not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Payment Service: Using MockPaymentService (development mode)")
        return MockPaymentService(
            failure_rate=settings.mock_failure_rate,
            max_latency=settings.mock_latency,
        )
    else:
        logger.info(
            f"Payment Service: Using StripePaymentService "
            f"({settings.env_mode.value} mode)"
        )
        return StripePaymentService()


__all__ = [
    "get_payment_service",
    "BasePaymentService",
    "PaymentResult",
    "MockPaymentService",
    "StripePaymentService",
]
