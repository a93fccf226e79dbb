"""
Stripe Payment Service Implementation

Production implementation using the official Stripe Python SDK.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - STRIPE_SECRET_KEY must be set in environment
"""

import logging

import stripe

from food_delivery.core.config import get_settings
from food_delivery.services.payment.base import (
    BasePaymentService,
    PaymentResult,
)

logger = logging.getLogger(__name__)


class StripePaymentService(BasePaymentService):
    """
    Production Stripe payment service implementation.

    Transactions are Stripe PaymentIntent ids; a transaction counts as paid
    once its intent reached the ``succeeded`` status.
    """

    def __init__(self):
        """
        Initialize Stripe with API key from settings.

        Raises:
            ValueError: If STRIPE_SECRET_KEY is not configured
        """
        settings = get_settings()

        if not settings.stripe_secret_key:
            raise ValueError(
                "STRIPE_SECRET_KEY is required for production mode. "
                "Set it in your .env file or environment variables."
            )

        stripe.api_key = settings.stripe_secret_key

        logger.info("StripePaymentService initialized")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "stripe"

    def _convert_from_cents(self, cents: int) -> float:
        """Convert cents back to dollars."""
        return cents / 100.0

    async def verify_transaction(self, transaction_id: str) -> PaymentResult:
        """Retrieve the PaymentIntent and check that it settled."""
        logger.info(f"Stripe: Verifying transaction {transaction_id}")

        try:
            intent = stripe.PaymentIntent.retrieve(transaction_id)

            if intent.status != "succeeded":
                logger.warning(
                    f"Stripe: Transaction {transaction_id} not settled "
                    f"(status={intent.status})"
                )
                return PaymentResult(
                    success=False,
                    transaction_id=transaction_id,
                    error_message=f"Payment is {intent.status}",
                    error_code="not_settled",
                )

            return PaymentResult(
                success=True,
                transaction_id=intent.id,
                amount=self._convert_from_cents(intent.amount_received),
                currency=intent.currency,
            )

        except stripe.InvalidRequestError as e:
            # Unknown payment intent id
            logger.warning(f"Stripe: Invalid request - {e}")
            return PaymentResult(
                success=False,
                transaction_id=transaction_id,
                error_message="Transaction not found",
                error_code="invalid_request",
            )
        except stripe.AuthenticationError as e:
            # API key issues
            logger.critical(f"Stripe: Authentication failed - {e}")
            return PaymentResult(
                success=False,
                transaction_id=transaction_id,
                error_message="Payment service configuration error",
                error_code="authentication_error",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe: Error - {e}")
            return PaymentResult(
                success=False,
                transaction_id=transaction_id,
                error_message="Payment service temporarily unavailable",
                error_code="stripe_error",
            )

    async def health_check(self) -> bool:
        """Verify Stripe API connectivity."""
        try:
            stripe.Balance.retrieve()
            return True
        except stripe.StripeError as e:
            logger.error(f"Stripe health check failed: {e}")
            return False
