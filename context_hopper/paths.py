"""CLI path policy and dependency injection helpers.

Core modules receive their collaborators by injection; this module makes
the CLI's choices of where state, settings and logs live.
"""

import os
from pathlib import Path

from .context_store import ContextStore
from .groups import SavedGroupStore
from .settings import SettingsManager
from .storage import JsonFileStore
from .tokens import TokenEstimator

STATE_DIR_NAME = ".context-hopper"


def get_project_dir() -> Path:
    """Project-scoped directory (``.context-hopper`` under the cwd)."""
    return Path.cwd() / STATE_DIR_NAME


def get_state_path() -> Path:
    """Workspace state file, overridable with ``CONTEXT_HOPPER_STATE``."""
    override = os.environ.get("CONTEXT_HOPPER_STATE")
    if override:
        return Path(override).expanduser()
    return get_project_dir() / "state.json"


def get_log_path() -> Path:
    override = os.environ.get("CONTEXT_HOPPER_LOG_PATH")
    if override:
        return Path(override).expanduser()
    return get_project_dir() / "context-hopper.log.jsonl"


def create_settings_manager() -> SettingsManager:
    return SettingsManager(project_dir=get_project_dir())


def create_state_store() -> JsonFileStore:
    return JsonFileStore(get_state_path())


def create_context_store(state: JsonFileStore | None = None, settings: SettingsManager | None = None) -> ContextStore:
    """Create a ContextStore wired to the CLI's state file and settings.

    Args:
        state: Shared state store (default: the workspace state file)
        settings: Settings manager (default: current project scopes)

    Returns:
        ContextStore restored from disk, using configured options and model
    """
    settings = settings or create_settings_manager()
    return ContextStore(
        state or create_state_store(),
        estimator=TokenEstimator(model=settings.get_token_model()),
        options=settings.get_optimization_options(),
    )


def create_group_store(state: JsonFileStore | None = None) -> SavedGroupStore:
    return SavedGroupStore(state or create_state_store())
