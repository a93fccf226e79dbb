"""
In-Memory Pub/Sub

Single-process broker used in development and tests: every subscriber owns
an asyncio queue that publishers fan out to.
"""

import asyncio
import logging
from collections import defaultdict
from typing import Any, AsyncIterator

from food_delivery.services.pubsub.base import BasePubSub

logger = logging.getLogger(__name__)


class InMemoryPubSub(BasePubSub):
    """Process-local broker."""

    def __init__(self):
        self._subscribers: dict[str, set[asyncio.Queue]] = defaultdict(set)

    @property
    def provider_name(self) -> str:
        return "memory"

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        queues = list(self._subscribers.get(channel, ()))
        for queue in queues:
            queue.put_nowait(payload)
        logger.debug(f"Published on {channel} to {len(queues)} subscriber(s)")

    async def subscribe(self, channel: str) -> AsyncIterator[dict[str, Any]]:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers[channel].add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers[channel].discard(queue)

    async def health_check(self) -> bool:
        return True
