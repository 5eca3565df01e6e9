"""context-hopper: collect files, line ranges and notes into one prompt-ready export.

The core pipeline (optimizer, scrubber, tree builder, token estimator,
context store and export assembler) is importable without the CLI.
"""

from .assembler import ExportResult
from .assembler import assemble
from .assembler import build_structure_note
from .context_store import ContextStore
from .groups import SavedGroupStore
from .models import ContextItem
from .models import ItemType
from .models import LineRange
from .models import OptimizationOptions
from .models import SavedGroup
from .optimizer import optimize
from .scrubber import ScrubResult
from .scrubber import scrub
from .tokens import TokenEstimator
from .tree import build_tree

__all__ = [
    "ContextItem",
    "ContextStore",
    "ExportResult",
    "ItemType",
    "LineRange",
    "OptimizationOptions",
    "SavedGroup",
    "SavedGroupStore",
    "ScrubResult",
    "TokenEstimator",
    "assemble",
    "build_structure_note",
    "build_tree",
    "optimize",
    "scrub",
]
