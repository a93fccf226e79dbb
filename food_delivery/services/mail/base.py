"""
Mail Service Abstract Base Class

Defines the interface for transactional email delivery. Mock (development)
and SendGrid (production) implementations share the template helpers below,
so callers only ever deal with ``send_verification_email``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class BaseMailService(ABC):
    """Abstract base class for mail services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_mail(
        self,
        subject: str,
        to_email: str,
        template: str,
        variables: Optional[dict[str, str]] = None,
    ) -> bool:
        """
        Send a templated email.

        Implementations never raise: delivery problems are logged and
        reported as ``False``.

        Args:
            subject: Email subject line
            to_email: Recipient address
            template: Template name known to the provider
            variables: Values substituted into the template

        Returns:
            bool: True if the provider accepted the message
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass

    async def send_verification_email(self, email: str, code: str) -> bool:
        """Send the account verification code to a freshly registered email."""
        sent = await self.send_mail(
            "Verify Your Email",
            email,
            "verify_email",
            {"code": code, "username": email},
        )
        if not sent:
            logger.warning(f"Verification email to {email} was not delivered")
        return sent
