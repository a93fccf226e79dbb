"""
Mock Payment Service Implementation

Simulates Stripe-like transaction lookups without making real API calls.
Used in development mode (ENV_MODE=development).

Behavior:
    - Optionally simulates response times and random declines
    - Transaction ids starting with ``declined`` always fail, which lets
      local clients exercise the failure path deterministically
"""

import asyncio
import random
import logging

from food_delivery.services.payment.base import (
    BasePaymentService,
    PaymentResult,
)

logger = logging.getLogger(__name__)


class MockPaymentService(BasePaymentService):
    """
    Mock implementation of the payment service.

    Attributes:
        failure_rate: Probability of simulated verification failure (0.0-1.0)
        max_latency: Maximum simulated response time in seconds
    """

    # Simulated failure reasons (mimics real Stripe decline codes)
    DECLINE_REASONS = [
        ("card_declined", "Your card was declined."),
        ("insufficient_funds", "Your card has insufficient funds."),
        ("expired_card", "Your card has expired."),
    ]

    def __init__(self, failure_rate: float = 0.0, max_latency: float = 0.0):
        self.failure_rate = failure_rate
        self.max_latency = max_latency

        logger.info(
            f"MockPaymentService initialized "
            f"(failure_rate={failure_rate:.0%}, latency<={max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(0, self.max_latency))

    def _should_fail(self, transaction_id: str) -> bool:
        """Determine if this request should simulate a failure."""
        if transaction_id.startswith("declined"):
            return True
        return random.random() < self.failure_rate

    async def verify_transaction(self, transaction_id: str) -> PaymentResult:
        """Simulate looking up a transaction."""
        await self._simulate_latency()

        if self._should_fail(transaction_id):
            error_code, error_message = random.choice(self.DECLINE_REASONS)
            logger.warning(f"Mock payment declined: {transaction_id} ({error_code})")
            return PaymentResult(
                success=False,
                transaction_id=transaction_id,
                error_message=error_message,
                error_code=error_code,
            )

        logger.info(f"Mock payment verified: {transaction_id}")
        return PaymentResult(success=True, transaction_id=transaction_id)

    async def health_check(self) -> bool:
        """Mock service is always healthy."""
        return True
