"""
Image upload and deletion, independent of FastAPI routing:
- Validate the multipart image (presence, image/* type, size cap)
- Forward accepted bytes to the media host
- Destroy assets by public_id
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile, status

from core import config
from core.cloudinary import MediaHostClient, MediaHostError, TransformationPolicy, UploadedAsset
from core.errors import ApiError

logger = logging.getLogger(__name__)

READ_CHUNK_BYTES = 1024 * 1024  # 1 MiB
UPLOAD_TRANSFORMATION = TransformationPolicy()


@dataclass(frozen=True)
class ImagePayload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def validate_image_type(file: UploadFile) -> str:
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if not content_type.startswith("image/"):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Only image files are allowed!")
    return content_type


async def read_limited(file: UploadFile, max_bytes: int) -> bytes:
    buf = bytearray()
    while True:
        chunk = await file.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise ApiError(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                "File too large",
                details=f"Max is {max_bytes} bytes.",
            )
    return bytes(buf)


async def accept_image(
    file: UploadFile | None,
    *,
    missing_message: str = "No image file provided",
    max_bytes: int = config.MAX_IMAGE_UPLOAD_BYTES,
) -> ImagePayload:
    """
    Gate an incoming upload before anything is sent upstream.
    """
    if file is None or not (file.filename or file.content_type):
        raise ApiError(status.HTTP_400_BAD_REQUEST, missing_message)

    content_type = validate_image_type(file)
    content = await read_limited(file, max_bytes)
    if not content:
        raise ApiError(status.HTTP_400_BAD_REQUEST, missing_message)

    return ImagePayload(filename=file.filename or "upload", content_type=content_type, content=content)


async def upload_image(client: MediaHostClient, payload: ImagePayload) -> UploadedAsset:
    asset = await client.upload_image(
        payload.content,
        filename=payload.filename,
        content_type=payload.content_type,
        folder=config.media_upload_folder(),
        allowed_formats=config.ALLOWED_IMAGE_FORMATS,
        transformation=UPLOAD_TRANSFORMATION,
    )
    logger.info(
        "Uploaded %s (%d bytes) as %s",
        payload.filename,
        payload.size_bytes,
        asset.public_id,
    )
    return asset


async def delete_image(client: MediaHostClient, public_id: str) -> dict:
    """
    Destroy one asset. Failures are logged and re-raised; the caller decides
    whether they block anything else.
    """
    try:
        result = await client.destroy(public_id)
    except MediaHostError:
        logger.exception("Error deleting image %s from media host", public_id)
        raise
    logger.info("Deleted image %s: %s", public_id, result.get("result"))
    return result
