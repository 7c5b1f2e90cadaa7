"""
Admin authentication endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from . import dependencies, schemas, service

router = APIRouter(prefix="/api/auth")


def _client_meta(request: Request) -> dict:
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": request.client.host if request.client else None,
    }


@router.post("/login")
async def login(payload: schemas.LoginRequest, request: Request) -> schemas.LoginResponse:
    return await service.login(payload, **_client_meta(request))


@router.post("/refresh")
async def refresh(payload: schemas.RefreshRequest, request: Request) -> dict:
    tokens = await service.refresh(payload, **_client_meta(request))
    return {"success": True, "tokens": tokens.model_dump()}


@router.post("/logout")
async def logout(
    payload: schemas.LogoutRequest,
    current_admin: dict = Depends(dependencies.get_current_admin),
) -> dict:
    return await service.logout(payload, admin_id=int(current_admin["id"]))


@router.get("/me")
async def me(current_admin: dict = Depends(dependencies.get_current_admin)) -> dict:
    return {"success": True, "data": service.to_admin_response(current_admin).model_dump()}
