"""Local filesystem storage for uploaded images.

Files are written below the configured upload directory and served back
under ``UPLOAD_URL_PREFIX`` by the static-file mount in ``main.py``.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import re
import secrets
import time
from pathlib import Path

from dongne_board.core.settings import settings

ALLOWED_MIME_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
    "image/heic",
}

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def decode_image_payload(data: str, mime_type: str, max_bytes: int) -> bytes:
    """Decode a base64 image payload, stripping any data URL header.

    Raises:
        ValueError: If the MIME type is not an allowed image type, the payload
            is not valid base64, or it exceeds ``max_bytes``.
    """
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValueError(
            f"MIME type not allowed: {mime_type!r}. "
            f"Allowed: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
        )
    payload = _DATA_URL_PREFIX.sub("", data.strip())
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as err:
        raise ValueError("Invalid base64 image payload") from err
    if not content:
        raise ValueError("Empty image payload")
    if len(content) > max_bytes:
        raise ValueError(
            f"File too large: {len(content)} bytes (max {max_bytes // 1024 // 1024}MB)"
        )
    return content


class LocalStorage:
    """Writes objects to a directory and maps keys to public URLs."""

    def __init__(self, root: str | Path, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_root(self) -> None:
        """Create the upload directory if it doesn't exist."""
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def normalize_key(rel_key: str) -> str:
        """Build a collision-resistant key under ``posts/`` from a filename."""
        path = Path(rel_key)
        ext = path.suffix or ".jpg"
        base_name = _UNSAFE_CHARS.sub("_", path.stem) or "image"
        stamp = int(time.time() * 1000)
        return f"posts/{stamp}_{secrets.token_hex(6)}_{base_name}{ext}"

    def url_for(self, key: str) -> str:
        return f"{self.url_prefix}/{key.lstrip('/')}"

    async def put(self, rel_key: str, content: bytes) -> tuple[str, str]:
        """Persist bytes and return the ``(key, url)`` pair."""
        key = self.normalize_key(rel_key)
        dest = self.root / key
        dest.parent.mkdir(parents=True, exist_ok=True)
        # Offload blocking file I/O to a thread to avoid stalling the event loop
        await asyncio.to_thread(dest.write_bytes, content)
        return key, self.url_for(key)


def extension_for(mime_type: str) -> str:
    """Return the file extension implied by a MIME type."""
    subtype = mime_type.split("/", 1)[-1] if "/" in mime_type else ""
    if subtype in {"jpeg", "jpg", ""}:
        return "jpg"
    return subtype


def get_storage() -> LocalStorage:
    """Return the storage backend configured from settings."""
    return LocalStorage(settings.upload_dir, settings.upload_url_prefix)
