"""
Key-value storage for the Mood Journal service.

This module defines the key-value interface every persisted record goes
through and an in-memory implementation of it. Values are opaque strings
(the callers store JSON). The interface is small enough that a persistent
backend like Redis can be dropped in without touching the callers.
"""

import asyncio
from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Async key-value store with prefix scanning."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or ``None`` if absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``. Removing an absent key is a no-op."""

    @abstractmethod
    async def get_by_prefix(self, prefix: str) -> list[str]:
        """Return the values of all keys starting with ``prefix``."""


class InMemoryKeyValueStore(KeyValueStore):
    """
    In-memory key-value store.

    Every operation runs under a single asyncio lock, so each one is atomic
    with respect to the others. Nothing is atomic across operations: two
    writers racing on one key resolve as last-write-wins.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._data[key] = value

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def get_by_prefix(self, prefix: str) -> list[str]:
        async with self._lock:
            return [
                value for key, value in self._data.items() if key.startswith(prefix)
            ]
