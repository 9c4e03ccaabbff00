"""A string-keyed store safe to use from several threads."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

V = TypeVar("V")


class ThreadSafeStore(Generic[V]):
    """A dictionary guarded by a lock."""

    def __init__(self) -> None:
        self._data: dict[str, V] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def get(self, key: str) -> V:
        """Return the value for key, raising KeyError if it is absent."""
        with self._lock:
            return self._data[key]

    def delete(self, key: str) -> None:
        """Remove key if present."""
        with self._lock:
            self._data.pop(key, None)

    def all_pairs(self) -> dict[str, V]:
        """Return a copy of every key and value."""
        with self._lock:
            return dict(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)