"""
Storage Service Factory

Returns the in-memory or S3 storage service based on ENV_MODE.
"""

import logging
from functools import lru_cache

from food_delivery.core.config import get_settings
from food_delivery.services.storage.base import BaseStorageService
from food_delivery.services.storage.mock import MockStorageService
from food_delivery.services.storage.s3 import S3StorageService

logger = logging.getLogger(__name__)


@lru_cache()
def get_storage_service() -> BaseStorageService:
    """Get the configured storage service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Storage Service: Using MockStorageService (development mode)")
        return MockStorageService(settings.uploads_bucket)
    else:
        logger.info(f"Storage Service: Using S3StorageService ({settings.env_mode.value} mode)")
        return S3StorageService()


__all__ = [
    "get_storage_service",
    "BaseStorageService",
    "MockStorageService",
    "S3StorageService",
]
