"""
Local SVG placeholder images for records without a photo.
"""

from __future__ import annotations

import re
from html import escape

from fastapi import APIRouter, Path, Query
from fastapi.responses import Response

router = APIRouter(prefix="/api/placeholder")

_HEX_COLOR_RE = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
DEFAULT_COLOR = "666666"


def render_placeholder(width: int, height: int, *, color: str = DEFAULT_COLOR, text: str | None = None) -> str:
    fill = color if _HEX_COLOR_RE.match(color or "") else DEFAULT_COLOR
    label = escape(text if text else f"{width}x{height}")
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<rect width="100%" height="100%" fill="#{fill}"/>'
        f'<text x="50%" y="50%" font-family="Arial, sans-serif" font-size="16" fill="#ffffff" '
        f'text-anchor="middle" dominant-baseline="middle">{label}</text>'
        "</svg>"
    )


@router.get("/{width}/{height}")
async def placeholder(
    width: int = Path(..., ge=1, le=4000),
    height: int = Path(..., ge=1, le=4000),
    color: str = Query(default=DEFAULT_COLOR, max_length=6),
    text: str | None = Query(default=None, max_length=100),
) -> Response:
    return Response(
        content=render_placeholder(width, height, color=color, text=text),
        media_type="image/svg+xml",
        headers={"Cache-Control": "public, max-age=31536000"},
    )
