"""On-disk storage of archive material uploads."""

from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from werkzeug.datastructures import FileStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    path: str
    size: int


def extension_of(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


class MaterialStorage:
    def __init__(self, root: str | Path):
        self._root = Path(root) / "archive"

    @property
    def root(self) -> Path:
        return self._root

    def _new_name(self, original: str) -> str:
        return f"materials-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension_of(original)}"

    def save(self, upload: FileStorage) -> StoredFile:
        self._root.mkdir(parents=True, exist_ok=True)
        target = self._root / self._new_name(upload.filename or "")
        upload.save(str(target))
        return StoredFile(path=str(target), size=target.stat().st_size)

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def remove(self, path: str) -> bool:
        """Delete a stored file; a missing file is not an error."""
        try:
            Path(path).unlink()
            return True
        except FileNotFoundError:
            logger.info("Material file already gone: %s", path)
            return False
