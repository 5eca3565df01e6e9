"""Storage module for workspace state persistence.

This module provides:
- KeyValueStore: Protocol for the get/update persistence collaborator.
- MemoryKeyValueStore: In-process store for tests and ephemeral use.
- JsonFileStore: Single-file JSON store with atomic writes and backup recovery.
"""

from .state_store import JsonFileStore
from .state_store import KeyValueStore
from .state_store import MemoryKeyValueStore

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
]
