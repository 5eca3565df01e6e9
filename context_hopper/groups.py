"""Named snapshots of the context store."""

import logging

from pydantic import ValidationError

from .models import ContextItem
from .models import SavedGroup
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

GROUPS_KEY = "savedContextGroups"


class SavedGroupStore:
    """Persists saved groups under ``GROUPS_KEY``.

    Groups are re-read from the key/value store on every call, so two
    instances over the same store always agree.
    """

    def __init__(self, state: KeyValueStore):
        self._state = state

    def _read(self) -> list[SavedGroup]:
        groups = []
        for raw in self._state.get(GROUPS_KEY, []) or []:
            try:
                groups.append(SavedGroup.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed saved group: {e}")
        return groups

    def _write(self, groups: list[SavedGroup]) -> None:
        self._state.update(GROUPS_KEY, [group.model_dump(mode="json") for group in groups])

    def list_groups(self) -> list[SavedGroup]:
        """All groups, pinned first, then alphabetical by name."""
        return sorted(self._read(), key=lambda g: (not g.pinned, g.name.casefold(), g.name))

    def get(self, group_id: str) -> SavedGroup | None:
        return next((g for g in self._read() if g.id == group_id), None)

    def find(self, name_or_id: str) -> SavedGroup | None:
        """Look a group up by id, falling back to an exact name match."""
        groups = self._read()
        for group in groups:
            if group.id == name_or_id:
                return group
        return next((g for g in groups if g.name == name_or_id), None)

    def save(self, name: str, items: list[ContextItem]) -> SavedGroup:
        """Freeze ``items`` under ``name``.

        Raises:
            ValueError: If name is empty
        """
        if not name or not name.strip():
            raise ValueError("Group name cannot be empty")

        group = SavedGroup.freeze(name.strip(), items)
        groups = self._read()
        groups.append(group)
        self._write(groups)
        logger.info(f"Saved group '{group.name}' with {len(group.items)} items (~{group.total_tokens} tokens)")
        return group

    def delete(self, group_id: str) -> bool:
        """Delete a group; returns False if it did not exist."""
        groups = self._read()
        remaining = [g for g in groups if g.id != group_id]
        if len(remaining) == len(groups):
            return False
        self._write(remaining)
        return True

    def toggle_pin(self, group_id: str) -> SavedGroup | None:
        """Flip ``pinned`` and return the updated group, or None if not found."""
        groups = self._read()
        target = next((g for g in groups if g.id == group_id), None)
        if target is None:
            return None
        target.pinned = not target.pinned
        self._write(groups)
        return target
