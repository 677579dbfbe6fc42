from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
import os
import re
import tempfile


class KeyValueStore(ABC):
    """Client-side byte store, one value per key."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self):
        self._storage: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._storage.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._storage[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._storage.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """One file per key under a directory; values outlive the process."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / safe_key

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        with os.fdopen(fd, "wb") as fh:
            fh.write(value)
        os.replace(tmp_path, self._path(key))

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
