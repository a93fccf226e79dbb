"""
Object Storage Abstract Base Class

Uploaded images (restaurant covers, dish photos) are stored as publicly
readable objects; clients keep only the returned URL.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional


class BaseStorageService(ABC):
    """Abstract base class for object storage."""

    def __init__(self, bucket: str):
        self.bucket = bucket

    @property
    @abstractmethod
    def provider_name(self) -> str:
        pass

    @staticmethod
    def build_key(filename: str) -> str:
        """Object key: epoch milliseconds followed by the original filename."""
        return f"{int(time.time() * 1000)}{filename}"

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    @abstractmethod
    async def upload(
        self,
        body: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Store a file and return its public URL.

        Raises:
            Exception: Provider errors propagate to the caller
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
