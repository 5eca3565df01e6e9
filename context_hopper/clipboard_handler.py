"""Cross-platform clipboard text writer for the context-hopper CLI."""

import logging
import platform
import shutil
import subprocess

logger = logging.getLogger(__name__)


class ClipboardError(RuntimeError):
    """Raised when no clipboard command succeeded."""


class ClipboardHandler:
    """Copy text to the clipboard on macOS, Linux, and Windows."""

    def __init__(self, system: str | None = None):
        """Initialize handler with platform detection.

        Args:
            system: Platform name override (for testing); defaults to platform.system()
        """
        self.platform = system or platform.system()

    def get_copy_commands(self) -> list[list[str]]:
        """Get platform-specific copy commands, in order of preference."""
        if self.platform == "Darwin":  # macOS
            return [["pbcopy"]]
        elif self.platform == "Linux":
            # Wayland first, then X11
            return [
                ["wl-copy"],
                ["xclip", "-selection", "clipboard"],
                ["xsel", "--clipboard", "--input"],
            ]
        elif self.platform == "Windows":
            return [["clip"]]
        else:
            return []

    def _run_command(self, command: list[str], text: str, timeout: int = 5) -> tuple[bool, str]:
        """Run a copy command with ``text`` on stdin and return (success, error)."""
        try:
            result = subprocess.run(
                command,
                input=text,
                capture_output=True,
                timeout=timeout,
                text=True,
                encoding="utf-8",
            )
            return result.returncode == 0, result.stderr
        except subprocess.TimeoutExpired:
            return False, "Command timed out"
        except OSError as e:
            return False, str(e)

    def copy(self, text: str) -> str:
        """Copy ``text`` to the clipboard.

        Returns:
            Name of the command that succeeded

        Raises:
            ClipboardError: If no available command succeeded
        """
        errors = []
        for command in self.get_copy_commands():
            if shutil.which(command[0]) is None:
                continue
            success, error = self._run_command(command, text)
            if success:
                return command[0]
            logger.warning(f"Clipboard command {command[0]} failed: {error}")
            errors.append(f"{command[0]}: {error.strip() or 'failed'}")

        if not errors:
            raise ClipboardError(f"No clipboard command available on {self.platform}. {self.get_platform_hint()}")
        raise ClipboardError("Clipboard copy failed (" + "; ".join(errors) + ")")

    def get_platform_hint(self) -> str:
        """Get platform-specific hint message for when no clipboard tool is found."""
        if self.platform == "Linux":
            return "Install wl-clipboard or xclip, or use --stdout."
        return "Use --stdout or --output instead."
