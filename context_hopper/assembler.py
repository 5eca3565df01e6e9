"""Export assembly: items in store order, optimized, concatenated, scrubbed."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import PurePath

from .file_reader import FileReader
from .file_reader import FileReadError
from .models import ContextItem
from .models import ItemType
from .models import OptimizationOptions
from .optimizer import optimize
from .optimizer import remove_empty_lines
from .scrubber import scrub
from .tree import build_tree
from .tree import common_ancestor
from .tree import to_pure_path

logger = logging.getLogger(__name__)

STRUCTURE_LABEL = "Project structure"


@dataclass
class ExportResult:
    """Assembled document ready for delivery.

    Attributes:
        text: Scrubbed export text
        redacted_count: Number of secrets redacted
        item_count: Number of items rendered (including failed files)
        failed_paths: File paths that could not be read
    """

    text: str
    redacted_count: int = 0
    item_count: int = 0
    failed_paths: list[str] = field(default_factory=list)


def prepare_item_text(item: ContextItem, options: OptimizationOptions, file_reader: FileReader) -> str:
    """Text an item contributes after optimization.

    File items are read through ``file_reader`` (which may raise
    ``FileReadError``) and run through the full optimizer. Notes only get
    blank-line compaction.
    """
    if item.type == ItemType.FILE:
        return optimize(file_reader(item.content, item.range), item.language_id, options)
    if options.remove_empty_lines:
        return remove_empty_lines(item.content)
    return item.content


def _file_header(item: ContextItem) -> str:
    header = f"\n// File: {PurePath(item.content).name}\n// Path: {item.content}\n"
    if item.range is not None:
        header += f"// Lines: {item.range.display()}\n"
    return header


def assemble(items: list[ContextItem], options: OptimizationOptions, file_reader: FileReader) -> ExportResult:
    """Build the export document.

    Files are read one at a time in item order. A file that fails to read
    is replaced by an inline error marker and the export continues.

    Args:
        items: Items in store order
        options: Optimization switches
        file_reader: Reads ``(path, range)`` into text

    Returns:
        ExportResult with the scrubbed text and redaction count
    """
    parts: list[str] = []
    failed: list[str] = []

    for item in items:
        if item.type == ItemType.FILE:
            try:
                text = prepare_item_text(item, options, file_reader)
            except FileReadError as e:
                logger.warning(f"Skipping unreadable file in export: {e}")
                failed.append(item.content)
                parts.append(f"\n// Error reading file: {item.content}\n")
                continue
            parts.append(_file_header(item) + text + "\n")
        else:
            parts.append(f"\n// Note:\n{prepare_item_text(item, options, file_reader)}\n")

    scrubbed = scrub("".join(parts))
    if scrubbed.redacted_count:
        logger.info(f"Redacted {scrubbed.redacted_count} secrets from export: {scrubbed.counts_by_rule}")

    return ExportResult(
        text=scrubbed.clean_text,
        redacted_count=scrubbed.redacted_count,
        item_count=len(items),
        failed_paths=failed,
    )


def build_structure_note(items: list[ContextItem], explicit_root: str | None = None) -> ContextItem:
    """Create a note holding the directory tree of the items' files.

    Raises:
        EmptyPathListError: If no file items are present
    """
    paths = list(dict.fromkeys(item.content for item in items if item.type == ItemType.FILE))
    tree = build_tree(paths, explicit_root)
    root = to_pure_path(explicit_root) if explicit_root else common_ancestor(paths)
    label = f"{STRUCTURE_LABEL} ({root.name})" if root.name else STRUCTURE_LABEL
    return ContextItem(type=ItemType.TEXT, content=f"{STRUCTURE_LABEL}:\n{tree}", label=label)
