"""
Image upload endpoints (admin only).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from auth import dependencies as auth_dependencies
from core.cloudinary import MediaHostClient, MediaHostError
from core.errors import ApiError, debug_details

from . import references, schemas, service
from .dependencies import get_media_host
from .public_id import extract_public_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload")


@router.post("")
async def upload_image(
    image: UploadFile | None = File(default=None),
    _: dict = Depends(auth_dependencies.get_current_admin),
    media_host: MediaHostClient = Depends(get_media_host),
) -> dict:
    payload = await service.accept_image(image)
    try:
        asset = await service.upload_image(media_host, payload)
    except MediaHostError as exc:
        logger.error("Upload error: %s", exc)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to upload image",
            extra=debug_details(exc),
        ) from exc

    return {
        "success": True,
        "data": asset.as_response(),
        "message": "Image uploaded successfully",
    }


@router.post("/validate-url")
async def validate_url(
    request: schemas.ValidateUrlRequest,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    url = (request.url or "").strip()
    if not url:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "URL is required")

    try:
        reference = references.parse_image_reference(url)
    except references.InvalidImageReference:
        reference = None
    is_inline = reference is not None and reference.kind is references.ImageReferenceKind.INLINE_DATA
    if not (is_inline or references.is_valid_url(url)):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid URL format")

    if not references.looks_like_image_url(url):
        # Accepted anyway; the client decides what to do with it.
        logger.warning("URL might not be an image: %s", url[:200])

    return {
        "success": True,
        "data": {"url": url, "valid": True},
        "message": "URL validated successfully",
    }


@router.delete("")
async def delete_image(
    request: schemas.DeleteImageRequest,
    _: dict = Depends(auth_dependencies.get_current_admin),
    media_host: MediaHostClient = Depends(get_media_host),
) -> dict:
    public_id = (request.public_id or "").strip()
    if not public_id:
        public_id = extract_public_id(request.url) or ""
    if not public_id:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Could not determine public_id from URL")

    try:
        result = await service.delete_image(media_host, public_id)
    except MediaHostError as exc:
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to delete image",
            extra=debug_details(exc),
        ) from exc

    return {
        "success": True,
        "data": {"public_id": public_id, "result": result.get("result")},
        "message": "Image deletion requested",
    }
