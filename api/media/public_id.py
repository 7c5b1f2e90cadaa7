"""
Recover the media host public_id from a delivery URL.

    https://res.cloudinary.com/<cloud>/image/upload/v1620000000/club/folder/photo.jpg
                                                    ^ version  ^ public_id + ext

The public_id is what `destroy` needs. Extraction is best-effort: any input
that does not look like a media host delivery URL gives None.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote, urlsplit

from core import config

logger = logging.getLogger(__name__)

UPLOAD_MARKER = "upload"

_VERSION_RE = re.compile(r"^v\d+$")
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def _is_cdn_host(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def extract_public_id(url: object, *, cdn_domain: str | None = None) -> str | None:
    if not isinstance(url, str) or not url.strip():
        return None

    domain = (cdn_domain or config.media_cdn_domain()).strip().lower()
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
    except ValueError:
        logger.debug("Could not parse media URL: %r", url)
        return None

    if not host or not domain or not _is_cdn_host(host, domain):
        return None

    segments = parts.path.split("/")
    try:
        marker = segments.index(UPLOAD_MARKER)
    except ValueError:
        return None

    after_upload = segments[marker + 1 :]
    if after_upload and _VERSION_RE.match(after_upload[0]):
        after_upload = after_upload[1:]

    with_ext = "/".join(after_upload)
    public_id = unquote(_EXTENSION_RE.sub("", with_ext))
    return public_id or None
