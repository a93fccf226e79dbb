"""
Mock Mail Service

Simulates email delivery for development.
No actual messages are sent - they are logged and kept in ``outbox``.
"""

import asyncio
import random
import uuid
import logging
from typing import Optional

from food_delivery.services.mail.base import BaseMailService

logger = logging.getLogger(__name__)


class MockMailService(BaseMailService):
    """Mock mail service for development and tests."""

    def __init__(self, failure_rate: float = 0.0, max_latency: float = 0.0):
        self.failure_rate = failure_rate
        self.max_latency = max_latency
        self.outbox: list[dict] = []
        logger.info(f"MockMailService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(0, self.max_latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_mail(
        self,
        subject: str,
        to_email: str,
        template: str,
        variables: Optional[dict[str, str]] = None,
    ) -> bool:
        """Simulate sending a templated email."""
        await self._simulate_latency()

        if self._should_fail():
            logger.warning(f"Mock email failed (simulated) to {to_email}")
            return False

        message_id = f"email_mock_{uuid.uuid4().hex[:12]}"
        self.outbox.append({
            "id": message_id,
            "subject": subject,
            "to": to_email,
            "template": template,
            "variables": dict(variables or {}),
        })
        logger.info(f"Mock email sent to {to_email}: {subject} (ID: {message_id})")
        return True

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
