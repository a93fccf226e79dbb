"""
Pub/Sub Factory

Development uses the in-process broker; staging/production share events
through Redis.
"""

import logging
from functools import lru_cache

from food_delivery.core.config import get_settings
from food_delivery.services.pubsub.base import (
    NEW_COOKED_ORDER,
    NEW_ORDER_UPDATE,
    NEW_PENDING_ORDER,
    BasePubSub,
)
from food_delivery.services.pubsub.memory import InMemoryPubSub
from food_delivery.services.pubsub.redis import RedisPubSub

logger = logging.getLogger(__name__)


@lru_cache()
def get_pubsub() -> BasePubSub:
    """Get the configured event broker."""
    settings = get_settings()

    if settings.is_development:
        logger.info("PubSub: Using InMemoryPubSub (development mode)")
        return InMemoryPubSub()
    else:
        logger.info(f"PubSub: Using RedisPubSub ({settings.env_mode.value} mode)")
        return RedisPubSub(settings.redis_url)


__all__ = [
    "get_pubsub",
    "BasePubSub",
    "InMemoryPubSub",
    "RedisPubSub",
    "NEW_PENDING_ORDER",
    "NEW_COOKED_ORDER",
    "NEW_ORDER_UPDATE",
]
