"""
Vision helpers - turn a book cover reference into an image content part
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def image_url_for(image_reference: str) -> str:
    """
    Resolve an image reference to something a vision model can fetch.

    ``data:`` and ``http(s):`` URLs pass through unchanged. Local paths
    (plain or ``file://``) are inlined as base64 data URLs.

    Raises:
        FileNotFoundError: if a local path does not exist
    """
    if image_reference.startswith(("data:", "http://", "https://")):
        return image_reference

    path_str = image_reference
    if image_reference.startswith("file://"):
        path_str = urlparse(image_reference).path

    path = Path(path_str)
    if not path.is_file():
        raise FileNotFoundError(f"Book image not found: {path}")

    mime_type, _ = mimetypes.guess_type(path.name)
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    logger.debug(f"Inlined image {path.name} ({mime_type or 'image/jpeg'}, {len(encoded)} chars)")
    return f"data:{mime_type or 'image/jpeg'};base64,{encoded}"


def image_message(text: str, image_reference: str) -> dict[str, Any]:
    """Build a user message carrying text plus one image"""
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": text},
            {"type": "image_url", "image_url": {"url": image_url_for(image_reference)}},
        ],
    }
