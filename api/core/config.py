"""
Environment-backed settings.

Everything is read lazily from `os.environ` so tests can monkeypatch values
per case. Malformed numeric values fall back to their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

MAX_IMAGE_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB
ALLOWED_IMAGE_FORMATS = ("jpg", "jpeg", "png", "gif", "webp")

DEFAULT_UPLOAD_FOLDER = "c-square-club"
DEFAULT_CDN_DOMAIN = "cloudinary.com"
DEFAULT_PROXY_TIMEOUT_S = 15.0
DEFAULT_PROXY_MAX_BYTES = 10 * 1024 * 1024

DEV_JWT_SECRET = "dev-change-this-secret"
DEFAULT_ACCESS_TOKEN_MIN = 60
DEFAULT_REFRESH_TOKEN_DAYS = 14

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "https://c-squareclub-chi.vercel.app",
)


class ConfigError(RuntimeError):
    pass


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def app_env() -> str:
    return _env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]


def media_cdn_domain() -> str:
    return _env_str("MEDIA_CDN_DOMAIN", DEFAULT_CDN_DOMAIN).lower()


def media_upload_folder() -> str:
    return _env_str("MEDIA_UPLOAD_FOLDER", DEFAULT_UPLOAD_FOLDER)


def proxy_timeout_s() -> float:
    return _env_float("PROXY_TIMEOUT_S", DEFAULT_PROXY_TIMEOUT_S)


def proxy_max_bytes() -> int:
    value = _env_int("PROXY_MAX_BYTES", DEFAULT_PROXY_MAX_BYTES)
    return value if value > 0 else DEFAULT_PROXY_MAX_BYTES


@dataclass(frozen=True)
class MediaHostCredentials:
    cloud_name: str
    api_key: str
    api_secret: str


def media_host_credentials() -> MediaHostCredentials:
    """
    Read media host credentials.

    The three `CLOUDINARY_*` variables win; `CLOUDINARY_URL`
    (`cloudinary://<key>:<secret>@<cloud>`) fills in whatever is missing.
    """
    cloud_name = _env_str("CLOUDINARY_CLOUD_NAME")
    api_key = _env_str("CLOUDINARY_API_KEY")
    api_secret = _env_str("CLOUDINARY_API_SECRET")

    combined = _env_str("CLOUDINARY_URL")
    if combined:
        parts = urlsplit(combined)
        if parts.scheme == "cloudinary":
            cloud_name = cloud_name or (parts.hostname or "")
            api_key = api_key or unquote(parts.username or "")
            api_secret = api_secret or unquote(parts.password or "")

    missing = [
        name
        for name, value in (
            ("CLOUDINARY_CLOUD_NAME", cloud_name),
            ("CLOUDINARY_API_KEY", api_key),
            ("CLOUDINARY_API_SECRET", api_secret),
        )
        if not value
    ]
    if missing:
        raise ConfigError(f"Media host credentials are not set: {', '.join(missing)}.")

    return MediaHostCredentials(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret)


def db_pool_max_size() -> int:
    value = _env_int("DB_POOL_MAX_SIZE", 10)
    return value if value > 0 else 10


def jwt_secret() -> str:
    # Set JWT_SECRET in production; the fallback only suits local runs.
    return _env_str("JWT_SECRET", DEV_JWT_SECRET)


def jwt_algorithm() -> str:
    return _env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    value = _env_int("ACCESS_TOKEN_EXPIRE_MIN", DEFAULT_ACCESS_TOKEN_MIN)
    return value if value > 0 else DEFAULT_ACCESS_TOKEN_MIN


def refresh_token_expire_days() -> int:
    value = _env_int("REFRESH_TOKEN_EXPIRE_DAYS", DEFAULT_REFRESH_TOKEN_DAYS)
    return value if value > 0 else DEFAULT_REFRESH_TOKEN_DAYS
