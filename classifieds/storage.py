# classifieds/storage.py
"""
Keyed persistence backends for the catalog.

Values are JSON-compatible documents stored under string keys. The
catalog keeps its board index under one key and each board's listings
under a key of its own, so a board can be loaded without touching the
others.
"""

import copy
import json
import logging
import os
import tempfile
import threading
import urllib.parse
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from .errors import StorageError


logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Contract for catalog persistence backends."""

    def read(self, key: str) -> Optional[Any]:
        """Return the document stored under ``key``, or ``None`` if absent.

        Raises ``StorageError`` when the stored bytes cannot be decoded.
        """
        ...

    def write(self, key: str, value: Any) -> None:
        """Replace the document under ``key`` with ``value``.

        ``value`` must be JSON-compatible. Raises ``StorageError`` when
        the backend cannot persist it.
        """
        ...


class MemoryStorage:
    """Dict-backed storage. Reads and writes copy, so callers never alias state."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def read(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def write(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonDirectoryStorage:
    """One UTF-8 JSON file per key under ``root``.

    File names are the percent-encoded key, so any group name maps to
    a single flat file. Writes land in a temporary file in the same
    directory and are moved into place with ``os.replace``.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        return self.root / (urllib.parse.quote(key, safe="") + ".json")

    def read(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", path, exc)
            raise StorageError(str(exc), key) from exc

    def write(self, key: str, value: Any) -> None:
        path = self._path(key)
        with self._lock:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=str(self.root), suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(value, f, ensure_ascii=False, indent=2)
                    os.replace(tmp_name, path)
                except BaseException:
                    if os.path.exists(tmp_name):
                        os.unlink(tmp_name)
                    raise
            except OSError as exc:
                logger.error("Failed to write %s: %s", path, exc)
                raise StorageError(str(exc), key) from exc
