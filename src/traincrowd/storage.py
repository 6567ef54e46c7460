"""Durable local key-value storage.

A tiny string-to-string store persisted as a JSON object on disk. The
dashboard only ever writes the last-entered device address here.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from traincrowd.exceptions import StorageError

_logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Structural storage interface; lets tests pass :class:`MemoryStorage`."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-lifetime storage with the same interface as :class:`LocalStorage`."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class LocalStorage:
    """JSON-file backed storage."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc

        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise StorageError(f"Storage file {self._path} is not JSON") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self._path} does not hold an object")
        return {str(k): str(v) for k, v in data.items()}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Cannot write {self._path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)
        _logger.debug("Stored %s in %s", key, self._path)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)
            _logger.debug("Removed %s from %s", key, self._path)
