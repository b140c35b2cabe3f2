"""Key-value slot storage, the persistence transport behind EventStore.

The store depends on this protocol only; swap implementations to change
where data lives without touching the event codec.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Named slots holding JSON-compatible scalars or strings."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default* if absent."""
        ...

    def put(self, values: dict[str, Any]) -> None:
        """Write all *values* in one go, overwriting existing slots."""
        ...


class InMemoryKeyValueStore:
    """Dictionary-backed slots.  Used by tests and ephemeral runs."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def put(self, values: dict[str, Any]) -> None:
        self._data.update(values)


class JsonFileKeyValueStore:
    """All slots in a single JSON object file on disk.

    A missing file reads as no slots.  A file that is not a JSON object is
    logged and also read as no slots; the next ``put`` rewrites it.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable slot file %s: %s", self._path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Slot file %s does not hold an object; ignoring it", self._path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def put(self, values: dict[str, Any]) -> None:
        data = self._read()
        data.update(values)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # ASCII-escaped output, so unpaired surrogates in notes stay writable.
        text = json.dumps(data, indent=2)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            tmp.replace(self._path)
        finally:
            tmp.unlink(missing_ok=True)
