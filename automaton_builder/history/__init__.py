"""Undo/redo engine and the command variants of the editor."""

from .command_stack import Command, CommandStack, HistoryEntry
from .commands import (
    AddState,
    AddToken,
    AddTransition,
    CommandVariant,
    Direction,
    MoveStates,
    PasteObjects,
    RemoveObjects,
    RemoveState,
    RemoveToken,
    RemoveTransition,
    RenameState,
    SetAccept,
    SetEpsilon,
    SetStart,
    SetTokenSymbol,
    TransitionAddToken,
    TransitionRemoveToken,
    apply,
    make_command,
)

__all__ = [
    "Command",
    "CommandStack",
    "HistoryEntry",
    "AddState",
    "AddToken",
    "AddTransition",
    "CommandVariant",
    "Direction",
    "MoveStates",
    "PasteObjects",
    "RemoveObjects",
    "RemoveState",
    "RemoveToken",
    "RemoveTransition",
    "RenameState",
    "SetAccept",
    "SetEpsilon",
    "SetStart",
    "SetTokenSymbol",
    "TransitionAddToken",
    "TransitionRemoveToken",
    "apply",
    "make_command",
]
