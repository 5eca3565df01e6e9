"""Settings manager for settings.yaml files.

Manages three-scope settings system:
- User global (~/.context-hopper/settings.yaml)
- Project (.context-hopper/settings.yaml)
- Local (.context-hopper/settings.local.yaml)
"""

import logging
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .models import OptimizationOptions
from .tokens import DEFAULT_MODEL

logger = logging.getLogger(__name__)

ScopeType = Literal["user", "project", "local"]

OPTIMIZATION_KEYS = ("remove_comments", "remove_empty_lines")


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, project_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            project_dir: Base directory for project/local settings (for testing).
                         If None, uses .context-hopper in current directory.
            user_dir: Base directory for user settings (for testing).
                      If None, uses ~/.context-hopper.
        """
        if project_dir is None:
            project_dir = Path(".context-hopper")
        if user_dir is None:
            user_dir = Path.home() / ".context-hopper"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = project_dir / "settings.yaml"
        self.local_settings_file = project_dir / "settings.local.yaml"

    def _scope_file(self, scope: ScopeType) -> Path:
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        if scope not in file_map:
            raise ValueError(f"Unknown settings scope: {scope}")
        return file_map[scope]

    def get_optimization_options(self) -> OptimizationOptions:
        """Get optimization switches merged from all scopes.

        Returns:
            OptimizationOptions (all off when nothing is configured)
        """
        section = self.get_merged_settings().get("optimization") or {}
        return OptimizationOptions(**{key: bool(section[key]) for key in OPTIMIZATION_KEYS if key in section})

    def set_optimization_option(self, name: str, enabled: bool, scope: ScopeType = "project") -> None:
        """Set one optimization switch.

        Args:
            name: "remove_comments" or "remove_empty_lines"
            enabled: New value
            scope: "user", "project", or "local"
        """
        if name not in OPTIMIZATION_KEYS:
            raise ValueError(f"Unknown optimization option: {name}")
        self._update_settings(self._scope_file(scope), {"optimization": {name: enabled}})
        logger.info(f"Set {scope} optimization.{name} = {enabled}")

    def get_token_model(self) -> str:
        """Get the tokenizer model name, defaulting to gpt-4."""
        section = self.get_merged_settings().get("tokens") or {}
        return section.get("model") or DEFAULT_MODEL

    def set_token_model(self, model: str, scope: ScopeType = "project") -> None:
        self._update_settings(self._scope_file(scope), {"tokens": {"model": model}})
        logger.info(f"Set {scope} tokens.model = {model}")

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}
        for path in (self.user_settings_file, self.project_settings_file, self.local_settings_file):
            settings = self._read_settings(path)
            if settings:
                merged = self._deep_merge(merged, settings)
        return merged

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist
        """
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except Exception as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        """Write settings to YAML file.

        Args:
            path: Path to settings file
            settings: Settings dictionary
        """
        # Ensure directory exists
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w", encoding="utf-8") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except Exception as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        """Update settings file with new values (deep merge).

        Args:
            path: Path to settings file
            updates: Updates to merge
        """
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
