"""Comment and blank-line stripping for captured source text.

This is a textual heuristic, not a parser: comment markers that appear
inside string literals (e.g. ``"/* not a comment */"``) are stripped too.
"""

import re
from pathlib import Path

from .models import OptimizationOptions

# Block comments, or a line comment whose "//" is not preceded by "\" or ":".
_COMMENT_PATTERN = re.compile(r"/\*[\s\S]*?\*/|(?<![\\:])//[^\r\n]*")

_BLANK_LINE_PATTERN = re.compile(r"^\s*[\r\n]", re.MULTILINE)

_EXTENSION_LANGUAGES: dict[str, str] = {
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".css": "css",
    ".go": "go",
    ".java": "java",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".json": "json",
    ".kt": "kotlin",
    ".md": "markdown",
    ".php": "php",
    ".py": "python",
    ".rs": "rust",
    ".scss": "scss",
    ".sh": "shellscript",
    ".swift": "swift",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".yaml": "yaml",
    ".yml": "yaml",
}

PLAINTEXT = "plaintext"


def guess_language_id(path: str) -> str:
    """Map a file extension to a language id, ``plaintext`` when unknown."""
    return _EXTENSION_LANGUAGES.get(Path(path).suffix.lower(), PLAINTEXT)


def remove_comments(text: str) -> str:
    return _COMMENT_PATTERN.sub("", text)


def remove_empty_lines(text: str) -> str:
    """Drop whitespace-only lines, then trim trailing whitespace on every line.

    Blank runs collapse to nothing, not to a single blank line.
    """
    text = _BLANK_LINE_PATTERN.sub("", text)
    return "\n".join(line.rstrip() for line in text.split("\n"))


def optimize(text: str, language_id: str | None, options: OptimizationOptions) -> str:
    """Apply the optimization pass selected by ``options``.

    Args:
        text: Source text
        language_id: Comment-syntax hint; every language currently gets the
            C-style treatment, ``None`` means plaintext
        options: Which passes to run

    Returns:
        Optimized text, or ``text`` unchanged when no pass is enabled
    """
    if options.is_identity:
        return text

    output = text
    if options.remove_comments:
        output = remove_comments(output)
    if options.remove_empty_lines:
        output = remove_empty_lines(output)
    return output
