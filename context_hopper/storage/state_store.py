"""
Key/value persistence for workspace state.

Stores the live item sequence and saved groups as one JSON document with
atomic writes, a backup copy, and corruption recovery.
"""

import contextlib
import copy
import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any
from typing import Protocol
from typing import runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the persistence collaborator.

    Values must be JSON-compatible.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` when absent."""
        ...

    def update(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        ...


class MemoryKeyValueStore:
    """In-process store; values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def update(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class JsonFileStore:
    """
    Key/value store backed by a single JSON file.

    Contract:
    - Inputs: string keys, JSON-compatible values
    - Side Effects: Writes <path> and <path>.backup
    - Errors: OSError when the file cannot be written
    """

    def __init__(self, path: Path):
        """Initialize with the state file path.

        Args:
            path: JSON file to read and write; parent directories are created on write
        """
        self.path = Path(path)
        self.backup_path = self.path.with_name(self.path.name + ".backup")
        self._data: dict[str, Any] | None = None

    def get(self, key: str, default: Any = None) -> Any:
        data = self._load()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def update(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = copy.deepcopy(value)
        self._save(data)
        logger.debug(f"State key '{key}' saved to {self.path}")

    def _load(self) -> dict[str, Any]:
        """Load state with corruption recovery.

        Returns:
            State dictionary (empty if neither file is usable)
        """
        if self._data is not None:
            return self._data

        # Try main file first
        if self.path.exists():
            try:
                with open(self.path, encoding="utf-8") as f:
                    self._data = self._as_dict(json.load(f))
                return self._data
            except (OSError, json.JSONDecodeError, TypeError) as e:
                logger.warning(f"Failed to load state, trying backup: {e}")

        # Try backup if main file failed or missing
        if self.backup_path.exists():
            try:
                with open(self.backup_path, encoding="utf-8") as f:
                    self._data = self._as_dict(json.load(f))
                logger.info("Loaded state from backup")
                return self._data
            except (OSError, json.JSONDecodeError, TypeError) as e:
                logger.error(f"Backup also corrupted: {e}")

        self._data = {}
        return self._data

    @staticmethod
    def _as_dict(data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save state with atomic write and backup."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Create backup if file exists
        if self.path.exists():
            try:
                shutil.copy2(self.path, self.backup_path)
            except Exception as e:
                logger.warning(f"Failed to create backup: {e}")

        # Write to temp file first (atomic write pattern)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=self.path.parent, prefix="state_", suffix=".tmp", delete=False, encoding="utf-8"
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            try:
                json.dump(data, tmp_file, indent=2, ensure_ascii=False)
                tmp_file.flush()

                # Atomic rename
                temp_path.replace(self.path)

            except Exception as e:
                # Clean up temp file on failure
                with contextlib.suppress(Exception):
                    temp_path.unlink()
                raise OSError(f"Failed to save state: {e}") from e
