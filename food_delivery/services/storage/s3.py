"""
S3 Storage Service

Production implementation using boto3. Objects are written with a
``public-read`` ACL so the URL can be embedded directly by clients.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from food_delivery.core.config import get_settings
from food_delivery.services.storage.base import BaseStorageService

logger = logging.getLogger(__name__)


class S3StorageService(BaseStorageService):
    """Uploads to the configured S3 bucket."""

    def __init__(self):
        settings = get_settings()
        super().__init__(settings.uploads_bucket)

        self.s3_client = boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            config=Config(retries={"max_attempts": 5}, region_name=settings.aws_region),
        )
        logger.info(f"S3StorageService initialized (bucket={self.bucket})")

    @property
    def provider_name(self) -> str:
        return "s3"

    async def upload(
        self,
        body: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> str:
        key = self.build_key(filename)
        extra = {"ContentType": content_type} if content_type else {}

        self.s3_client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ACL="public-read",
            **extra,
        )
        logger.info(f"upload_file_to_s3:: SUCCESS, key:{key}")
        return self.public_url(key)

    async def health_check(self) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 health check failed: {e}")
            return False
