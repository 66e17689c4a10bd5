"""Entity model: states, tokens, transitions and the graph that owns them."""

from .entities import LayoutPriority, Position, State, Token, Transition, new_id
from .automaton_graph import AutomatonGraph, GraphIntegrityError, RemovedObjects
from .clipboard import (
    Clipboard,
    PasteResult,
    Selection,
    apply_paste,
    copy_selection,
    cut,
    paste,
    plan_paste,
    removal_targets,
)

__all__ = [
    "LayoutPriority",
    "Position",
    "State",
    "Token",
    "Transition",
    "new_id",
    "AutomatonGraph",
    "GraphIntegrityError",
    "RemovedObjects",
    "Clipboard",
    "PasteResult",
    "Selection",
    "apply_paste",
    "copy_selection",
    "cut",
    "paste",
    "plan_paste",
    "removal_targets",
]
