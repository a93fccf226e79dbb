"""
Mock Storage Service

Keeps uploaded objects in memory for development and tests.
"""

import logging
from typing import Optional

from food_delivery.services.storage.base import BaseStorageService

logger = logging.getLogger(__name__)


class MockStorageService(BaseStorageService):
    """In-memory bucket."""

    def __init__(self, bucket: str):
        super().__init__(bucket)
        self.objects: dict[str, dict] = {}
        logger.info(f"MockStorageService initialized (bucket={bucket})")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def upload(
        self,
        body: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> str:
        key = self.build_key(filename)
        self.objects[key] = {"body": body, "content_type": content_type}
        logger.info(f"Mock upload stored: {key} ({len(body)} bytes)")
        return self.public_url(key)

    async def health_check(self) -> bool:
        return True
