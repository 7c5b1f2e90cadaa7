"""
Toast (site-wide event notification) endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from auth import dependencies as auth_dependencies
from core.cloudinary import MediaHostClient, MediaHostError
from core.errors import ApiError, debug_details
from media import service as media_service
from media.dependencies import get_media_host

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/toast")

NOT_FOUND = "Toast not found"
# Columns that may be cleared with an explicit null.
NULLABLE = {"event_id"}


def serialize(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "message": row["message"],
        "link": row.get("link") or "",
        "eventId": row.get("event_id"),
        "photo": row.get("photo") or "",
        "isActive": bool(row["is_active"]),
        "createdAt": row.get("created_at"),
    }


@router.get("")
async def list_toasts() -> dict:
    rows = await repository.list_toasts()
    return {"success": True, "data": [serialize(r) for r in rows]}


@router.post("/photo")
async def upload_toast_photo(
    photo: UploadFile | None = File(default=None),
    _: dict = Depends(auth_dependencies.get_current_admin),
    media_host: MediaHostClient = Depends(get_media_host),
) -> dict:
    if photo is None or not photo.filename:
        logger.error("Photo upload error: no file in request")
        raise ApiError(status.HTTP_400_BAD_REQUEST, "No photo uploaded", extra={"debug": None})
    payload = await media_service.accept_image(photo, missing_message="No photo uploaded")

    try:
        asset = await media_service.upload_image(media_host, payload)
    except MediaHostError as exc:
        logger.error("Photo upload failed: %s", exc)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to upload photo",
            extra=debug_details(exc),
        ) from exc

    return {"success": True, "url": asset.secure_url, "debug": asset.as_response()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_toast(
    payload: schemas.ToastCreate,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    row = await repository.create_toast(payload.model_dump())
    return {"success": True, "data": serialize(row), "message": "Toast created successfully"}


@router.put("/{toast_id}")
async def update_toast(
    toast_id: int,
    payload: schemas.ToastUpdate,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    fields = {
        name: value
        for name, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or name in NULLABLE
    }
    row = await repository.update_toast(toast_id, fields)
    if row is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return {"success": True, "data": serialize(row), "message": "Toast updated successfully"}


@router.delete("/{toast_id}")
async def delete_toast(
    toast_id: int,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    if not await repository.delete_toast(toast_id):
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return {"success": True, "message": "Toast deleted successfully"}
