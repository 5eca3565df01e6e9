"""Directory-tree summaries of a flat set of file paths.

Works purely on path strings; nothing is read from the filesystem.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import PurePath
from pathlib import PurePosixPath
from pathlib import PureWindowsPath

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

TreeNode = dict[str, "TreeNode"]


class EmptyPathListError(ValueError):
    """Raised when a tree is requested for no paths at all."""


def _is_windows_path(path: str) -> bool:
    return "\\" in path or bool(_DRIVE_PATTERN.match(path))


def to_pure_path(path: str, windows: bool | None = None) -> PurePath:
    """Parse ``path`` with Windows rules if it looks like a Windows path."""
    if windows is None:
        windows = _is_windows_path(path)
    return PureWindowsPath(path) if windows else PurePosixPath(path)


def common_ancestor(paths: list[str]) -> PurePath:
    """Longest common path-segment prefix of ``paths``.

    A single path's ancestor is its parent directory. Comparison is
    segment-wise, so ``/a/bc`` and ``/a/bcd`` share ``/a``.
    """
    if not paths:
        raise EmptyPathListError("Cannot compute a common ancestor of an empty path list")

    windows = any(_is_windows_path(p) for p in paths)
    parsed = [to_pure_path(p, windows) for p in dict.fromkeys(paths)]
    if len(parsed) == 1:
        return parsed[0].parent

    shared: list[str] = []
    for segments in zip(*(p.parts for p in parsed), strict=False):
        if any(segment != segments[0] for segment in segments[1:]):
            break
        shared.append(segments[0])

    flavour = PureWindowsPath if windows else PurePosixPath
    return flavour(*shared)


def _relative_parts(path: PurePath, root: PurePath) -> tuple[str, ...]:
    try:
        return path.relative_to(root).parts
    except ValueError:
        # Outside the root: keep the whole path without its anchor
        parts = path.parts
        return parts[1:] if path.anchor else parts


def build_nested(paths: Iterable[PurePath], root: PurePath) -> TreeNode:
    """Nest every path's segments below ``root`` into a mapping."""
    tree: TreeNode = {}
    for path in paths:
        node = tree
        for part in _relative_parts(path, root):
            node = node.setdefault(part, {})
    return tree


def render_tree(node: TreeNode, prefix: str = "") -> list[str]:
    """Render a nested mapping depth-first with sorted siblings."""
    lines: list[str] = []
    names = sorted(node)
    for index, name in enumerate(names):
        is_last = index == len(names) - 1
        lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{name}")
        children = node[name]
        if children:
            lines.extend(render_tree(children, prefix + (SPACE if is_last else PIPE)))
    return lines


def build_tree(paths: list[str], explicit_root: str | None = None) -> str:
    """Render ``paths`` as a directory tree.

    Args:
        paths: File paths (absolute or relative, POSIX or Windows style)
        explicit_root: Root to display paths under; defaults to the
            common ancestor of all paths

    Returns:
        ``Root: <root>`` followed by one line per tree entry

    Raises:
        EmptyPathListError: If ``paths`` is empty
    """
    if not paths:
        raise EmptyPathListError("Cannot build a tree from an empty path list")

    windows = any(_is_windows_path(p) for p in paths)
    if explicit_root is not None:
        root = to_pure_path(explicit_root, windows or _is_windows_path(explicit_root))
    else:
        root = common_ancestor(paths)

    parsed = [to_pure_path(p, windows) for p in paths]
    lines = [f"Root: {root}"]
    lines.extend(render_tree(build_nested(parsed, root)))
    return "\n".join(lines) + "\n"
