"""Storage layer - abstract backend and in-memory implementation."""

from edqorta.storage.base import StorageBackend
from edqorta.storage.memory import InMemoryStorage

__all__ = ["StorageBackend", "InMemoryStorage"]
