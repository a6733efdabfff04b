"""Minimal key-value stores for state that outlives a quiz session."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

from api.utils.json_utils import read_json_file, write_json_file

log = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    All keys live in one JSON object file.
    Every set rewrites the whole file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        try:
            data = read_json_file(self.path, {})
        except ValueError:
            log.warning("Store file %s is not valid JSON; starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            log.warning("Store file %s does not hold an object; starting empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            write_json_file(self.path, data)
