"""File validation utilities for document uploads."""

import re
from pathlib import Path

SAFE_FILENAME_PATTERN = re.compile(r"[^a-zA-Z0-9._-]")

# Accepted MIME types and the extension a stored file gets
ALLOWED_CONTENT_TYPES = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/tiff": ".tiff",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
}

OLE_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
ZIP_SIGNATURE = b"PK\x03\x04"

# Magic bytes (file signatures) per MIME type
FILE_SIGNATURES = {
    "application/pdf": [b"%PDF"],
    "image/jpeg": [b"\xff\xd8\xff"],
    "image/png": [b"\x89PNG\r\n\x1a\n"],
    "image/webp": [b"RIFF"],  # RIFF container, verified with WEBP at offset 8
    "image/tiff": [b"II*\x00", b"MM\x00*"],
    "application/msword": [OLE_SIGNATURE],
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": [ZIP_SIGNATURE],
    "application/vnd.ms-excel": [OLE_SIGNATURE],
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": [ZIP_SIGNATURE],
}


def is_allowed_content_type(content_type: str | None) -> bool:
    return content_type is not None and content_type.lower() in ALLOWED_CONTENT_TYPES


def validate_file_signature(content: bytes, content_type: str) -> bool:
    """Validate that file content matches the declared MIME type.

    This prevents content-type spoofing where a file is uploaded with a
    fake content-type header.

    Args:
        content: The raw file content bytes
        content_type: The declared MIME type

    Returns:
        True if the file signature matches the declared content type
    """
    content_type = content_type.lower()
    signatures = FILE_SIGNATURES.get(content_type)
    if not signatures:
        return False

    if content_type == "image/webp":
        return content.startswith(b"RIFF") and len(content) > 12 and content[8:12] == b"WEBP"

    return any(content.startswith(sig) for sig in signatures)


def extension_for(content_type: str, filename: str | None = None) -> str:
    """Extension for a stored file.

    The uploaded name's suffix is kept when it is one of the suffixes that
    belong to the content type (``.jpeg`` stays ``.jpeg``).
    """
    default = ALLOWED_CONTENT_TYPES[content_type.lower()]
    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix == default or (default, suffix) in {(".jpg", ".jpeg"), (".tiff", ".tif")}:
            return suffix
    return default


def safe_filename(filename: str | None) -> str | None:
    """Basename of an uploaded file name, or None when unusable."""
    if not filename:
        return None
    name = Path(filename.replace("\\", "/")).name
    if not name or name in (".", ".."):
        return None
    return name[:255]


def sanitize_filename_part(value: str, max_length: int = 100) -> str:
    """Replace characters unsafe in a Content-Disposition filename."""
    return SAFE_FILENAME_PATTERN.sub("_", value)[:max_length]
