"""Data models for captured context.

Defines the core types shared by the store, the optimizer and the exporter:
- ItemType: Kind of captured context
- LineRange: Inclusive, zero-indexed line bounds of a file slice
- ContextItem: One unit of context (file slice or note)
- OptimizationOptions: Comment/blank-line stripping switches
- SavedGroup: Named, frozen snapshot of the store's items
"""

from __future__ import annotations

import secrets
import time
from enum import Enum
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator


def new_item_id() -> str:
    """Generate an opaque id, unique even for ids created in the same millisecond."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


class ItemType(str, Enum):
    """Type of context item.

    Types:
    - FILE: References a file on disk by absolute path
    - TEXT: Embeds a free-form note
    """

    FILE = "file"
    TEXT = "text"


class LineRange(BaseModel):
    """Inclusive zero-indexed line bounds."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> LineRange:
        if self.start > self.end:
            raise ValueError(f"Invalid line range: start ({self.start}) is after end ({self.end})")
        return self

    def display(self) -> str:
        """1-indexed ``start-end`` form shown to users."""
        return f"{self.start + 1}-{self.end + 1}"


class ContextItem(BaseModel):
    """A unit of captured context.

    Attributes:
        id: Unique, stable identifier
        type: File slice or note
        content: Absolute file path (file) or literal note text (text)
        label: Display name, defaults to the file's base name
        language_id: Comment-syntax hint for the optimizer
        range: Line bounds; None means the whole file
        tokens: Cached token count; None means not computed or invalidated
    """

    id: str = Field(default_factory=new_item_id)
    type: ItemType
    content: str
    label: str | None = None
    language_id: str | None = None
    range: LineRange | None = None
    tokens: int | None = None

    @property
    def is_file(self) -> bool:
        return self.type == ItemType.FILE

    @property
    def display_label(self) -> str:
        """Label as shown in listings, with a ``:start-end`` suffix for ranges."""
        if self.is_file:
            text = self.label or Path(self.content).name or self.content
        else:
            text = self.label or self.content
        if self.range is not None:
            text += f" :{self.range.display()}"
        return text

    def same_source(self, other: ContextItem) -> bool:
        """True if both are file items over the same path and range."""
        return self.is_file and other.is_file and self.content == other.content and self.range == other.range


class OptimizationOptions(BaseModel):
    """Switches for the optimization pass."""

    model_config = ConfigDict(frozen=True)

    remove_comments: bool = False
    remove_empty_lines: bool = False

    @property
    def is_identity(self) -> bool:
        return not (self.remove_comments or self.remove_empty_lines)


class SavedGroup(BaseModel):
    """A named snapshot of the store's items.

    Only ``pinned`` changes after creation. ``total_tokens`` is a historical
    value and is never recomputed.
    """

    id: str = Field(default_factory=new_item_id)
    name: str
    items: list[ContextItem] = Field(default_factory=list)
    pinned: bool = False
    total_tokens: int = 0
    created_at: int = Field(default_factory=lambda: int(time.time() * 1000))

    @classmethod
    def freeze(cls, name: str, items: list[ContextItem]) -> SavedGroup:
        """Create a group from a deep copy of ``items``."""
        copies = [item.model_copy(deep=True) for item in items]
        return cls(
            name=name,
            items=copies,
            total_tokens=sum(item.tokens or 0 for item in copies),
        )
