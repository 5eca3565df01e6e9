"""CLI commands for context-hopper."""

from .config import config
from .export import export_cmd
from .group import group
from .items import add_cmd
from .items import clear_cmd
from .items import list_cmd
from .items import note_cmd
from .items import remove_cmd
from .items import reorder_cmd
from .items import tokens_cmd
from .items import tree_cmd

__all__ = [
    "add_cmd",
    "clear_cmd",
    "config",
    "export_cmd",
    "group",
    "list_cmd",
    "note_cmd",
    "remove_cmd",
    "reorder_cmd",
    "tokens_cmd",
    "tree_cmd",
]
