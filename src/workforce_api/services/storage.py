"""File storage backends for document versions."""

import hashlib
import logging
from pathlib import Path
from typing import Protocol

from workforce_api.config import get_settings
from workforce_api.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


def content_hash(content: bytes) -> str:
    """MD5 hex digest used to name stored files."""
    return hashlib.md5(content, usedforsecurity=False).hexdigest()


def document_path(employee_no: str, document_type_code: str, digest: str, extension: str) -> str:
    """Storage key ``{employee_no}/{document_type_code}/{hash}{ext}``."""
    for part in (employee_no, document_type_code):
        if not part or "/" in part or "\\" in part or part in (".", ".."):
            raise ValidationError("Invalid storage path component")
    return f"{employee_no}/{document_type_code}/{digest}{extension}"


class FileStorage(Protocol):
    """Where uploaded document files live."""

    async def save(self, key: str, content: bytes) -> None: ...

    async def read(self, key: str) -> bytes: ...

    async def delete(self, key: str) -> None: ...


class LocalFileStorage:
    """Stores files below a root directory on local disk."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise ValidationError("Invalid storage path")
        return path

    async def save(self, key: str, content: bytes) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to store file: {type(e).__name__}")
            raise StorageError("Failed to store file") from e

    async def read(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise StorageError("Stored file is missing") from e
        except OSError as e:
            logger.error(f"Failed to read file: {type(e).__name__}")
            raise StorageError("Failed to read file") from e

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete file: {type(e).__name__}")
            raise StorageError("Failed to delete file") from e


def get_storage() -> FileStorage:
    """Storage backend configured for this process."""
    return LocalFileStorage(get_settings().upload_dir)
