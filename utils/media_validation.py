"""Validation helpers for base64 image payloads sent by the canvas client."""

import base64
import binascii
import re
from typing import Optional, Tuple

from utils.errors import ImagePayloadError

DEFAULT_MIME_TYPE = "image/png"
DATA_URL_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


def split_data_url(raw: str) -> Tuple[str, str]:
    """Return `(mime_type, payload)` with any leading data-URL prefix removed.

    Payloads without a prefix are assumed to be PNG, which is what the canvas
    exports.
    """
    match = DATA_URL_PATTERN.match(raw)
    if match is None:
        return DEFAULT_MIME_TYPE, raw
    return match.group(1).lower(), raw[match.end():]


def strip_data_url_prefix(raw: str) -> str:
    """Remove a leading `data:image/<subtype>;base64,` prefix if present."""
    return split_data_url(raw)[1]


def require_image_payload(raw: Optional[str]) -> Tuple[str, str]:
    """Validate that an image payload was supplied and split off its prefix.

    Raises:
        ImagePayloadError: If the payload is missing or empty after stripping.
    """
    if raw is None or not raw.strip():
        raise ImagePayloadError("No image payload was provided.")
    mime_type, payload = split_data_url(raw.strip())
    if not payload:
        raise ImagePayloadError("Image payload is empty.")
    return mime_type, payload


def decode_base64_image(payload: str) -> bytes:
    """Decode a base64 payload into raw bytes.

    The image content itself is not inspected.

    Raises:
        ImagePayloadError: If the payload is not valid base64.
    """
    compact = "".join(payload.split())
    try:
        image_bytes = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImagePayloadError("Image payload is not valid base64.") from exc
    if not image_bytes:
        raise ImagePayloadError("Image payload decoded to zero bytes.")
    return image_bytes


def extension_for(mime_type: str) -> str:
    """Pick a file extension for a stored image from its MIME type."""
    ext = "png"
    if mime_type and "/" in mime_type:
        candidate = mime_type.split("/")[-1].lower()
        if candidate in ("jpeg", "jpg", "png", "webp", "bmp", "gif"):
            ext = "jpg" if candidate == "jpeg" else candidate
        elif candidate == "svg+xml":
            ext = "svg"
    return ext
