"""
Uploads Router

Multipart image upload forwarded to object storage.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from food_delivery.schemas import UploadResponse
from food_delivery.services.storage import BaseStorageService, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.post("", response_model=UploadResponse)
async def upload_file(
    file: UploadFile = File(...),
    storage: BaseStorageService = Depends(get_storage_service),
):
    """
    Store an uploaded file and return its public URL.

    Storage failures are reported as ``ok=False`` rather than an HTTP error.
    """
    body = await file.read()
    try:
        url = await storage.upload(body, file.filename or "upload", file.content_type)
    except Exception as e:
        logger.error(f"Upload of {file.filename} failed ({storage.provider_name}): {e}")
        return UploadResponse(ok=False, error="Could not upload file")

    logger.info(f"Uploaded {file.filename} ({len(body)} bytes) -> {url}")
    return UploadResponse(ok=True, url=url)
