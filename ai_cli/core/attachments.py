"""Turn raw command-line inputs into Responses API content parts."""

from __future__ import annotations

import base64
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

STDIN_PLACEHOLDER = "-"

_URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".tiff": "image/tiff",
    ".tif": "image/tiff",
    ".svg": "image/svg+xml",
    ".json": "application/json",
    ".pdf": "application/pdf",
    ".js": "text/javascript",
    ".css": "text/css",
    ".c": "text/x-c",
    ".cpp": "text/x-c",
    ".h": "text/x-c",
    ".hpp": "text/x-c",
    ".txt": "text/plain",
    ".html": "text/html",
    ".htm": "text/html",
    ".md": "text/markdown",
    ".php": "text/x-php",
    ".py": "text/x-python",
    ".sh": "application/x-sh",
}
DEFAULT_MIME_TYPE = "application/octet-stream"
PDF_MIME_TYPE = "application/pdf"

ContentPart = Dict[str, Any]


def mime_type(name: str) -> str:
    """Look up the MIME type of *name* by its extension."""
    # Query strings would otherwise hide the extension of a URL.
    name = name.split("?", 1)[0].split("#", 1)[0]
    return MIME_TYPES.get(Path(name).suffix.lower(), DEFAULT_MIME_TYPE)


def is_image(name: str) -> bool:
    return mime_type(name).startswith("image/")


def is_pdf(name: str) -> bool:
    return mime_type(name) == PDF_MIME_TYPE


def to_data_url(name: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type(name)};base64,{encoded}"


def text_part(text: str) -> ContentPart:
    return {"type": "input_text", "text": text}


def _resolve_url(url: str) -> ContentPart:
    if is_image(url):
        return {"type": "input_image", "image_url": url, "detail": "high"}
    if is_pdf(url):
        return {"type": "input_file", "file_url": url}
    return text_part(f"URL: {url}")


def _resolve_file(path: Path, raw: str) -> ContentPart:
    data = path.read_bytes()
    if is_image(raw):
        return {"type": "input_image", "image_url": to_data_url(raw, data), "detail": "high"}
    if is_pdf(raw):
        return {"type": "input_file", "filename": path.name, "file_data": to_data_url(raw, data)}
    # Everything else, including unknown binary types, is sent as text.
    return text_part(f"Filename: {raw}\n\n" + data.decode("utf-8", errors="replace"))


def resolve_input(item: str, stdin_text: str = "") -> Optional[ContentPart]:
    """Classify one raw input and build its content part.

    Returns ``None`` only for the stdin placeholder when stdin is blank.
    """
    if item == STDIN_PLACEHOLDER:
        if not stdin_text.strip():
            return None
        return text_part(stdin_text)

    if _URL_PATTERN.match(item):
        return _resolve_url(item)

    path = Path(item)
    try:
        is_file = path.is_file()
    except OSError:
        is_file = False
    if is_file:
        return _resolve_file(path, item)

    return text_part(item)


def resolve_inputs(items: Iterable[str], stdin_text: str = "") -> List[ContentPart]:
    parts = []
    for item in items:
        part = resolve_input(item, stdin_text)
        if part is not None:
            parts.append(part)
    return parts
