"""Reading captured files, whole or by line range."""

import re
from pathlib import Path
from typing import Protocol

from .models import LineRange

# \n, \r\n and \r only; form feeds and other separators stay inside their line
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class FileReadError(OSError):
    """Raised when a captured file cannot be read.

    Attributes:
        path: Path that failed to read
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot read {path}: {reason}")


class FileReader(Protocol):
    def __call__(self, path: str, line_range: LineRange | None = None) -> str: ...


def slice_lines(text: str, line_range: LineRange | None) -> str:
    """Return the inclusive zero-indexed line span of ``text``.

    Lines are separated by ``\\n``, ``\\r\\n`` or ``\\r``.
    """
    if line_range is None:
        return text
    lines = _LINE_BREAK.split(text)
    return "\n".join(lines[line_range.start : line_range.end + 1])


def read_file(path: str, line_range: LineRange | None = None) -> str:
    """Read a UTF-8 text file, optionally limited to a line range.

    Raises:
        FileReadError: If the file is missing, unreadable or not UTF-8 text
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(path, str(e) or type(e).__name__) from e
    return slice_lines(text, line_range)
