"""Image upload endpoint for the Dongne Board API."""

import logging

from fastapi import APIRouter, HTTPException, status

from dongne_board.core.settings import settings
from dongne_board.schemas.storage import ImageUpload, StoredObject
from dongne_board.services.storage import decode_image_payload, extension_for

from ..dependencies import CurrentUserDep, StorageDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/images", response_model=StoredObject, status_code=status.HTTP_201_CREATED)
async def upload_image(
    payload: ImageUpload,
    current_user: CurrentUserDep,
    storage: StorageDep,
) -> StoredObject:
    """Store a base64-encoded image and return its public URL.

    Raises:
        HTTPException: 400 for a disallowed type, bad encoding or oversize
            payload, 500 if the file cannot be written
    """
    try:
        content = decode_image_payload(payload.base64, payload.mime_type, settings.max_upload_bytes)
    except ValueError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err

    filename = f"image.{extension_for(payload.mime_type)}"
    try:
        key, url = await storage.put(filename, content)
    except OSError as err:
        logger.exception("Failed to store upload from user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Upload failed: {err}",
        ) from err

    logger.info("User %s uploaded %s (%d bytes)", current_user.id, key, len(content))
    return StoredObject(url=url, key=key)
