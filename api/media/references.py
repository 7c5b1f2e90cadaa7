"""
Image reference parsing and URL checks.

A stored `photo` value is one of three things: empty, an http(s) URL to a
hosted image, or an inline `data:image/...;base64,...` URL. Parse it once
into `ImageReference` instead of re-testing the string at each use site.

Everything here is syntactic. Nothing touches the network.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_DATA_URL_RE = re.compile(
    r"^data:(?P<media_type>image/[A-Za-z0-9.+\-]+)"
    r"(?P<params>(?:;[A-Za-z0-9.\-]+=[^;,]*)*)"
    r";base64,(?P<payload>[A-Za-z0-9+/\s]*={0,2})$",
    re.IGNORECASE,
)
_IMAGE_EXTENSION_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|svg)(\?.*)?$", re.IGNORECASE)

KNOWN_IMAGE_HOSTS = (
    "cloudinary.com",
    "imgur.com",
    "unsplash.com",
    "githubusercontent.com",
    "linkedin.com",
    "licdn.com",
    "twitter.com",
    "twimg.com",
    "instagram.com",
    "facebook.com",
    "fbcdn.net",
)


class InvalidImageReference(ValueError):
    pass


class ImageReferenceKind(str, Enum):
    EMPTY = "empty"
    EXTERNAL_URL = "external_url"
    INLINE_DATA = "inline_data"


@dataclass(frozen=True)
class ImageReference:
    kind: ImageReferenceKind
    value: str = ""
    media_type: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.kind is ImageReferenceKind.EMPTY


EMPTY_REFERENCE = ImageReference(ImageReferenceKind.EMPTY)


def _split_absolute(candidate: str):
    if not candidate or candidate != candidate.strip() or any(ch.isspace() for ch in candidate):
        return None
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates it; bad ports raise ValueError.
        parts.port
    except ValueError:
        return None
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return None
    if not parts.hostname:
        return None
    return parts


def is_valid_url(candidate: object) -> bool:
    """
    True for an absolute URL with a scheme and a host, whatever the scheme.
    """
    if not isinstance(candidate, str):
        return False
    return _split_absolute(candidate) is not None


def _is_http_url(candidate: str) -> bool:
    parts = _split_absolute(candidate)
    return parts is not None and parts.scheme.lower() in ("http", "https")


def _parse_data_url(candidate: str) -> ImageReference | None:
    match = _DATA_URL_RE.match(candidate)
    if match is None:
        return None
    payload = re.sub(r"\s+", "", match.group("payload"))
    if not payload:
        return None
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return None
    return ImageReference(
        ImageReferenceKind.INLINE_DATA,
        value=candidate,
        media_type=match.group("media_type").lower(),
    )


def parse_image_reference(raw: object) -> ImageReference:
    """
    Classify a stored photo value.

    None and blank strings are the empty reference; anything that is neither
    an http(s) URL nor an inline image data URL raises InvalidImageReference.
    """
    if raw is None:
        return EMPTY_REFERENCE
    if not isinstance(raw, str):
        raise InvalidImageReference("Image reference must be a string.")

    candidate = raw.strip()
    if not candidate:
        return EMPTY_REFERENCE

    if candidate[:5].lower() == "data:":
        parsed = _parse_data_url(candidate)
        if parsed is None:
            raise InvalidImageReference("Inline image must be a base64 data:image/* URL.")
        return parsed

    if _is_http_url(candidate):
        return ImageReference(ImageReferenceKind.EXTERNAL_URL, value=candidate)

    raise InvalidImageReference(
        "Photo must be a valid image URL (supports HTTP/HTTPS URLs, data URLs, and CDN links)"
    )


def is_valid_image_url(candidate: object) -> bool:
    try:
        parse_image_reference(candidate)
    except InvalidImageReference:
        return False
    return True


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def looks_like_image_url(url: str) -> bool:
    """
    Loose heuristic: image file extension, a host known to serve images, or
    inline image data. Misses are only worth a warning.
    """
    if url.lower().startswith("data:image/"):
        return True
    if _IMAGE_EXTENSION_RE.search(url):
        return True
    parts = _split_absolute(url)
    if parts is None or not parts.hostname:
        return False
    host = parts.hostname.lower()
    return any(_host_matches(host, known) for known in KNOWN_IMAGE_HOSTS)
