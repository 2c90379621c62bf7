"""Key-value storage for whole JSON documents.

Each key is one file under the data directory. Reads and writes always
cover the full document; there are no partial updates.
"""

import os
import re
from pathlib import Path

import config

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStorage:
    """Stores one string document per key as <data_dir>/<key>.json."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize storage.

        Args:
            data_dir: Directory holding the documents. Defaults to config.DATA_DIR.
        """
        self.data_dir = Path(data_dir or config.DATA_DIR)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        """Read a document. Returns None if missing or unreadable."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except (IOError, UnicodeDecodeError):
            return None

    def set(self, key: str, value: str) -> None:
        """Write a document atomically."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = str(path) + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, str(path))

    def remove(self, key: str) -> None:
        """Delete a document if present."""
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


class MemoryStorage:
    """In-process storage with the same interface as JsonFileStorage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.documents: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.documents.get(key)

    def set(self, key: str, value: str) -> None:
        self.documents[key] = value

    def remove(self, key: str) -> None:
        self.documents.pop(key, None)
