"""File storage for uploaded issue documents.

Files are written under ``settings.STORAGE_LOCAL_PATH`` using a generated
name so user-supplied filenames never become filesystem paths.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

from carenav.config import settings
from carenav.integrations.base import BaseIntegration

_MIME_EXTENSIONS: dict[str, str] = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "text/plain": ".txt",
}


def file_extension(content_type: str, original_name: str) -> str:
    suffix = PurePosixPath(original_name).suffix.lower()
    if suffix:
        return suffix
    return _MIME_EXTENSIONS.get(content_type, ".bin")


class StorageClient(BaseIntegration):
    """Local-disk storage client."""

    def __init__(self, root: str | Path | None = None) -> None:
        super().__init__("storage")
        self._root = Path(root or settings.STORAGE_LOCAL_PATH)

    @property
    def mode(self) -> str:
        return "local"

    async def health_check(self) -> bool:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error("Storage root %s is not writable: %s", self._root, e)
            return False
        return True

    def _path(self, file_key: str) -> Path:
        path = (self._root / file_key).resolve()
        if self._root.resolve() not in path.parents:
            raise ValueError(f"Invalid file key: {file_key}")
        return path

    async def upload_file(
        self,
        file_content: bytes,
        original_name: str,
        content_type: str = "application/octet-stream",
        folder: str = "uploads",
    ) -> dict[str, Any]:
        filename = f"{uuid.uuid4().hex}{file_extension(content_type, original_name)}"
        file_key = f"{folder}/{filename}"

        local_file = self._path(file_key)
        local_file.parent.mkdir(parents=True, exist_ok=True)
        local_file.write_bytes(file_content)

        self.logger.info("Local upload: %s (%d bytes)", file_key, len(file_content))
        return {
            "file_key": file_key,
            "filename": filename,
            "original_name": original_name,
            "content_type": content_type,
            "size_bytes": len(file_content),
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
        }

    async def read_file(self, file_key: str) -> bytes:
        return self._path(file_key).read_bytes()

    async def delete_file(self, file_key: str) -> bool:
        path = self._path(file_key)
        existed = path.exists()
        if existed:
            path.unlink()
        self.logger.info("File deleted | key=%s | existed=%s", file_key, existed)
        return existed
