"""The live, ordered set of captured context items."""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from .assembler import prepare_item_text
from .file_reader import FileReader
from .file_reader import FileReadError
from .file_reader import read_file
from .models import ContextItem
from .models import ItemType
from .models import LineRange
from .models import OptimizationOptions
from .optimizer import guess_language_id
from .storage import KeyValueStore
from .tokens import TokenEstimator

logger = logging.getLogger(__name__)

ITEMS_KEY = "contextHopper.items"

ItemsObserver = Callable[[list[ContextItem]], None]


class ContextStore:
    """Owns the ordered item sequence.

    Contract:
    - File items with the same path and range never coexist
    - Every mutation persists the sequence under ``ITEMS_KEY`` and
      notifies observers with the new list
    - Token counts are cached on items and invalidated when options change
    """

    def __init__(
        self,
        state: KeyValueStore,
        *,
        file_reader: FileReader = read_file,
        estimator: TokenEstimator | None = None,
        options: OptimizationOptions | None = None,
    ):
        """Initialize store and restore any persisted items.

        Args:
            state: Persistence collaborator
            file_reader: Reads ``(path, range)`` into text
            estimator: Token estimator (default: tiktoken for gpt-4)
            options: Initial optimization options
        """
        self._state = state
        self._file_reader = file_reader
        self._estimator = estimator or TokenEstimator()
        self._options = options or OptimizationOptions()
        self._observers: list[ItemsObserver] = []
        self._items: list[ContextItem] = self._restore()

    def _restore(self) -> list[ContextItem]:
        items: list[ContextItem] = []
        for raw in self._state.get(ITEMS_KEY, []) or []:
            try:
                items.append(ContextItem.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed stored item: {e}")
        return items

    # ----- observers -----

    def subscribe(self, observer: ItemsObserver) -> None:
        """Register a callback receiving the item list after every change."""
        self._observers.append(observer)

    def _commit(self) -> None:
        self._state.update(ITEMS_KEY, [item.model_dump(mode="json") for item in self._items])
        snapshot = self.get_items()
        for observer in self._observers:
            try:
                observer(snapshot)
            except Exception:
                logger.exception(f"Error in items observer {getattr(observer, '__name__', observer)!r}")

    # ----- queries -----

    @property
    def options(self) -> OptimizationOptions:
        return self._options

    def get_items(self) -> list[ContextItem]:
        """Return a copy of the current sequence."""
        return [item.model_copy(deep=True) for item in self._items]

    def get(self, item_id: str) -> ContextItem | None:
        for item in self._items:
            if item.id == item_id:
                return item.model_copy(deep=True)
        return None

    def __len__(self) -> int:
        return len(self._items)

    def total_tokens(self) -> int:
        """Sum of cached counts; uncached items count as 0."""
        return sum(item.tokens or 0 for item in self._items)

    # ----- mutations -----

    def add(self, item: ContextItem) -> bool:
        """Append ``item`` unless it duplicates a stored file item.

        Notes without a cached count are estimated on the way in.

        Returns:
            True if the item was stored, False if it was a duplicate
        """
        if self._is_duplicate(item):
            return False

        item = item.model_copy(deep=True)
        if item.type == ItemType.TEXT and item.tokens is None:
            item.tokens = self._estimate(item)
        self._items.append(item)
        self._commit()
        return True

    def add_file(
        self,
        path: str | Path,
        line_range: LineRange | None = None,
        *,
        label: str | None = None,
        language_id: str | None = None,
    ) -> ContextItem | None:
        """Capture a file (or a slice of it).

        An unreadable file is still added, with a token count of 0.

        Returns:
            The stored item, or None if it was a duplicate
        """
        path_str = str(Path(path).resolve())
        item = ContextItem(
            type=ItemType.FILE,
            content=path_str,
            label=label or Path(path_str).name,
            language_id=language_id or guess_language_id(path_str),
            range=line_range,
        )
        if self._is_duplicate(item):
            return None
        try:
            item.tokens = self._estimate(item)
        except FileReadError as e:
            logger.error(f"Error reading file for token calculation: {e}")
            item.tokens = 0
        return item if self.add(item) else None

    def add_note(self, text: str) -> ContextItem:
        """Append a note with a freshly estimated token count."""
        item = ContextItem(type=ItemType.TEXT, content=text)
        item.tokens = self._estimate(item)
        self._items.append(item)
        self._commit()
        return item.model_copy(deep=True)

    def remove(self, item_id: str) -> None:
        """Remove an item; unknown ids are ignored."""
        self.remove_many([item_id])

    def remove_many(self, item_ids: Iterable[str]) -> None:
        doomed = set(item_ids)
        self._items = [item for item in self._items if item.id not in doomed]
        self._commit()

    def reorder(self, item_ids: list[str]) -> None:
        """Rebuild the sequence with ``item_ids`` first, in that order.

        Unknown ids are ignored. Items not named in ``item_ids`` are kept and
        follow the named ones in their previous relative order.
        """
        by_id = {item.id: item for item in self._items}
        ordered: list[ContextItem] = []
        for item_id in dict.fromkeys(item_ids):
            if item_id in by_id:
                ordered.append(by_id.pop(item_id))
        ordered.extend(item for item in self._items if item.id in by_id)
        self._items = ordered
        self._commit()

    def clear(self) -> None:
        self._items = []
        self._commit()

    def load(self, items: Iterable[ContextItem]) -> None:
        """Replace the whole sequence with copies of ``items``.

        Duplicate file items in ``items`` are dropped (first one wins).
        """
        loaded: list[ContextItem] = []
        for item in items:
            if item.type == ItemType.FILE and any(existing.same_source(item) for existing in loaded):
                continue
            loaded.append(item.model_copy(deep=True))
        self._items = loaded
        self._commit()

    # ----- tokens -----

    def set_options(self, options: OptimizationOptions) -> None:
        """Replace optimization options, invalidating and recomputing every count."""
        if options == self._options:
            return
        self._options = options
        for item in self._items:
            item.tokens = None
        self.recalculate_tokens()

    def recalculate_tokens(self) -> None:
        """Re-derive every item's text and re-estimate its tokens.

        A file that cannot be read keeps its previous count; the failure
        is logged and the remaining items are still processed.
        """
        for item in self._items:
            try:
                item.tokens = self._estimate(item)
            except FileReadError as e:
                logger.warning(f"Keeping previous token count for {item.content}: {e}")
        self._commit()

    def _is_duplicate(self, item: ContextItem) -> bool:
        if item.type == ItemType.FILE and any(existing.same_source(item) for existing in self._items):
            logger.debug(f"Ignoring duplicate file item: {item.display_label}")
            return True
        return False

    def _estimate(self, item: ContextItem) -> int:
        return self._estimator.estimate(prepare_item_text(item, self._options, self._file_reader))
