"""
Media host (Cloudinary) HTTP client.

Used endpoints (relative to https://api.cloudinary.com/v1_1/<cloud_name>):
- POST /image/upload   -> {"public_id": ..., "secure_url": ..., "url": ..., ...}
- POST /image/destroy  -> {"result": "ok" | "not found"}

Requests are signed: every signed parameter except `file`, `api_key`,
`cloud_name` and `resource_type` is sorted by name, joined as
`k=v&k=v`, suffixed with the API secret and SHA-1 hashed.

One client is built at startup (see `api/main.py`) and injected into the
routes that need it.
"""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from . import config

API_BASE_URL = "https://api.cloudinary.com/v1_1"

# Upload has no explicit deadline; this only caps a hung connection.
DEFAULT_TIMEOUT_S = 60.0

UNSIGNED_PARAMS = {"file", "api_key", "cloud_name", "resource_type"}


# Media host failures are explicit and separable from other runtime errors.
class MediaHostError(RuntimeError):
    pass


@dataclass(frozen=True)
class TransformationPolicy:
    width: int = 1200
    height: int = 1200
    crop: str = "limit"
    quality: str = "auto:good"
    fetch_format: str = "auto"

    def to_param(self) -> str:
        return ",".join(
            [
                f"c_{self.crop}",
                f"f_{self.fetch_format}",
                f"h_{self.height}",
                f"q_{self.quality}",
                f"w_{self.width}",
            ]
        )


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    public_id: str
    secure_url: str
    raw: dict[str, Any]

    def as_response(self) -> dict[str, str]:
        return {"url": self.url, "public_id": self.public_id, "secure_url": self.secure_url}


def _param_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    signed = sorted(
        (k, _param_value(v))
        for k, v in params.items()
        if k not in UNSIGNED_PARAMS and v not in (None, "", [])
    )
    payload = "&".join(f"{k}={v}" for k, v in signed)
    return hashlib.sha1(f"{payload}{api_secret}".encode("utf-8")).hexdigest()


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:300]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return resp.text[:300]


class MediaHostClient:
    def __init__(
        self,
        credentials: config.MediaHostCredentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        clock=time.time,
    ) -> None:
        self.credentials = credentials
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout_s)
        self._clock = clock

    @classmethod
    def from_env(cls, **kwargs: Any) -> "MediaHostClient":
        return cls(config.media_host_credentials(), **kwargs)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    def _endpoint(self, action: str) -> str:
        return f"{API_BASE_URL}/{self.credentials.cloud_name}/image/{action}"

    def _signed(self, params: dict[str, Any]) -> dict[str, str]:
        params = {k: v for k, v in params.items() if v not in (None, "", [])}
        params["timestamp"] = int(self._clock())
        signature = sign_params(params, self.credentials.api_secret)
        form = {k: _param_value(v) for k, v in params.items()}
        form["api_key"] = self.credentials.api_key
        form["signature"] = signature
        return form

    async def _post(self, action: str, *, data: dict[str, str], files: Any = None) -> dict[str, Any]:
        try:
            resp = await self._http.post(self._endpoint(action), data=data, files=files)
        except httpx.HTTPError as exc:
            raise MediaHostError(f"Media host {action} request failed: {exc}") from exc

        if resp.status_code != 200:
            raise MediaHostError(
                f"Media host {action} request failed: {resp.status_code} {_error_message(resp)}"
            )

        try:
            data_out = resp.json()
        except ValueError as exc:
            raise MediaHostError(f"Media host {action} returned invalid JSON.") from exc
        if not isinstance(data_out, dict):
            raise MediaHostError(f"Media host {action} returned an unexpected payload.")
        return data_out

    async def upload_image(
        self,
        content: bytes,
        *,
        filename: str,
        content_type: str,
        folder: str,
        allowed_formats: Iterable[str] = config.ALLOWED_IMAGE_FORMATS,
        transformation: TransformationPolicy | None = None,
    ) -> UploadedAsset:
        """
        Store one image on the media host and return its canonical reference.
        """
        policy = transformation or TransformationPolicy()
        form = self._signed(
            {
                "folder": folder,
                "allowed_formats": list(allowed_formats),
                "transformation": policy.to_param(),
            }
        )
        data = await self._post(
            "upload",
            data=form,
            files={"file": (filename or "upload", content, content_type)},
        )

        public_id = str(data.get("public_id") or "").strip()
        secure_url = str(data.get("secure_url") or data.get("url") or "").strip()
        if not public_id or not secure_url:
            raise MediaHostError("Media host upload returned no public_id/url.")

        # Callers only ever get the https URL.
        return UploadedAsset(url=secure_url, public_id=public_id, secure_url=secure_url, raw=data)

    async def destroy(self, public_id: str, *, invalidate: bool = False) -> dict[str, Any]:
        public_id = (public_id or "").strip()
        if not public_id:
            raise MediaHostError("public_id is empty.")
        form = self._signed({"public_id": public_id, "invalidate": invalidate or None})
        return await self._post("destroy", data=form)
