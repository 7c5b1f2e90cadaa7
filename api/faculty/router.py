"""
Faculty directory endpoints.

Reads are public; writes need an admin token. Deleting a member leaves its
photo on the media host (use DELETE /api/upload to clean it up).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.errors import ApiError

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/faculty")

NOT_FOUND = "Faculty member not found"


def serialize(row: dict) -> dict:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "designation": row["designation"],
        "department": row["department"],
        "bio": row.get("bio") or "",
        "photo": row.get("photo") or "",
        "email": row.get("email") or "",
        "linkedin": row.get("linkedin") or "",
        "specialization": list(row.get("specialization") or []),
        "experience": row.get("experience") or "",
        "education": row.get("education") or "",
        "isActive": bool(row["is_active"]),
        "displayOrder": int(row["display_order"]),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


@router.get("")
async def list_faculty(
    active: bool | None = Query(default=None),
    department: str = Query(default="", max_length=100),
) -> dict:
    rows = await repository.list_faculty_members(active=active, department=department)
    return {"success": True, "count": len(rows), "data": [serialize(r) for r in rows]}


@router.get("/{member_id}")
async def get_faculty(member_id: int) -> dict:
    row = await repository.get_faculty_member(member_id)
    if row is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return {"success": True, "data": serialize(row)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_faculty(
    payload: schemas.FacultyMemberIn,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    logger.info("Creating faculty member %s", payload.name)
    row = await repository.create_faculty_member(payload.model_dump())
    return {
        "success": True,
        "data": serialize(row),
        "message": "Faculty member added successfully",
    }


@router.put("/{member_id}")
async def update_faculty(
    member_id: int,
    payload: schemas.FacultyMemberIn,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    row = await repository.update_faculty_member(member_id, payload.model_dump(exclude_unset=True))
    if row is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return {
        "success": True,
        "data": serialize(row),
        "message": "Faculty member updated successfully",
    }


@router.delete("/{member_id}")
async def delete_faculty(
    member_id: int,
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> dict:
    if not await repository.delete_faculty_member(member_id):
        raise ApiError(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return {"success": True, "message": "Faculty member deleted successfully"}
