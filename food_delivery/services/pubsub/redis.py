"""
Redis Pub/Sub

Multi-process broker for staging/production. Payloads travel as JSON over
Redis channels, so every API worker sees events published by the others.
"""

import json
import logging
from typing import Any, AsyncIterator

import redis.asyncio as redis

from food_delivery.services.pubsub.base import BasePubSub

logger = logging.getLogger(__name__)


class RedisPubSub(BasePubSub):
    """Broker backed by Redis PUBLISH/SUBSCRIBE."""

    def __init__(self, redis_url: str):
        self._redis = redis.from_url(redis_url, decode_responses=True)
        logger.info("RedisPubSub initialized")

    @property
    def provider_name(self) -> str:
        return "redis"

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        await self._redis.publish(channel, json.dumps(payload))

    async def subscribe(self, channel: str) -> AsyncIterator[dict[str, Any]]:
        pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe(channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    yield json.loads(message["data"])
                except json.JSONDecodeError:
                    logger.warning(f"Dropping malformed event on {channel}")
        finally:
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()

    async def health_check(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False
