from __future__ import annotations

import base64
import binascii
import io

from PIL import Image, UnidentifiedImageError

from drawity.protocol.constants import SNAPSHOT_PREFIX


def encode_data_url(img: Image.Image) -> str:
    """Encode an image as a PNG data URL (the canvas snapshot wire format)."""
    bio = io.BytesIO()
    img.save(bio, format="PNG", optimize=True)
    return SNAPSHOT_PREFIX + base64.b64encode(bio.getvalue()).decode("ascii")


def decode_data_url(data_url: str) -> Image.Image:
    """
    Decode a `data:<mime>;base64,<payload>` snapshot into an RGBA image.

    Raises ValueError for anything that is not a base64 image data URL.
    """
    if not data_url.startswith("data:"):
        raise ValueError("snapshot is not a data URL")
    header, sep, payload = data_url.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("snapshot data URL is not base64-encoded")
    try:
        raw = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"bad base64 payload: {e}") from e
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"snapshot payload is not an image: {e}") from e
    return img.convert("RGBA")
