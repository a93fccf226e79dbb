"""
Payment Service Abstract Base Class

Defines the interface for verifying promotion payments. Restaurant owners pay
on the client side; the backend only records a payment once the provider
confirms the transaction went through.

Design Pattern: Strategy Pattern
    - MockPaymentService in development
    - StripePaymentService in staging/production
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class PaymentResult:
    """
    Standardized result from a payment lookup.

    Attributes:
        success: Whether the transaction is confirmed as paid
        transaction_id: Provider identifier of the transaction
        amount: Amount paid in dollars
        currency: Currency code (e.g., "usd")
        error_message: Error description if verification failed
        error_code: Machine-readable error code
    """
    success: bool
    transaction_id: Optional[str] = None
    amount: Optional[float] = None
    currency: str = "usd"
    error_message: Optional[str] = None
    error_code: Optional[str] = None


class BasePaymentService(ABC):
    """
    Abstract base class for payment services.

    Example:
        >>> service = get_payment_service()  # Returns Mock or Stripe
        >>> result = await service.verify_transaction("pi_123")
        >>> if result.success:
        ...     print(f"Paid: {result.amount}")
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the payment provider.

        Returns:
            str: Provider name (e.g., "mock", "stripe")
        """
        pass

    @abstractmethod
    async def verify_transaction(self, transaction_id: str) -> PaymentResult:
        """
        Confirm that a client-side transaction was paid.

        Args:
            transaction_id: Identifier returned to the client by the provider

        Returns:
            PaymentResult: ``success`` is True only for settled payments
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the payment service.

        Returns:
            bool: True if service is reachable and operational
        """
        pass
