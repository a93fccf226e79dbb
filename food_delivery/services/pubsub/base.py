"""
Order Event Pub/Sub Abstract Base Class

GraphQL subscriptions (pending, cooked and updated orders) listen on named
channels; services publish small JSON-serializable payloads carrying ids,
and each subscriber reloads the rows it needs from its own session.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

NEW_PENDING_ORDER = "NEW_PENDING_ORDER"
NEW_COOKED_ORDER = "NEW_COOKED_ORDER"
NEW_ORDER_UPDATE = "NEW_ORDER_UPDATE"


class BasePubSub(ABC):
    """Abstract base class for event brokers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @abstractmethod
    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        """Deliver ``payload`` to every current subscriber of ``channel``."""
        pass

    @abstractmethod
    def subscribe(self, channel: str) -> AsyncIterator[dict[str, Any]]:
        """
        Iterate over payloads published on ``channel`` from now on.

        The subscription is released when the iterator is closed.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
