"""
Local JSON Directory Storage

Each key is one file, <data_dir>/<key>.json. A write goes to a temporary
file in the same directory and is then moved over the old document, so a
crash mid-write leaves either the old or the new document, never half of one.

TRADEOFFS:
- Not safe for concurrent writers: two processes sharing a directory
  are last-write-wins with no conflict detection
- Every mutation rewrites a whole collection (fine for a back office)
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from fincorp.services.storage.interface import (
    CorruptDocumentError,
    KeyValueStoreInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStoreInterface):
    """Key-value store backed by a directory of JSON files."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptDocumentError(f"{path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

        logger.debug("document_written", key=key, path=str(path), size=len(value))

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e
