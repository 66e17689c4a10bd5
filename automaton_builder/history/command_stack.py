"""Generic undo/redo stack of forward/backward command pairs."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..graph.entities import new_id

logger = logging.getLogger(__name__)


@dataclass
class Command:
    """An undoable operation.

    ``forward(data)`` applies the effect and ``backward(data)`` reverts it.
    ``data`` is an opaque record both callables may read and update.
    """

    display_text: str
    forward: Callable[[Any], None]
    backward: Callable[[Any], None]
    data: Any = None
    id: str = field(default_factory=new_id)


@dataclass
class HistoryEntry:
    """A read-only view of one stack slot, for action-stack viewers."""

    command_id: str
    display_text: str
    applied: bool
    is_current: bool


StackListener = Callable[["CommandStack"], None]


class CommandStack:
    """Undo/redo engine over opaque commands.

    ``pointer`` is the index of the last applied command, -1 when nothing is
    applied. Commands above the pointer form the redo tail.
    """

    def __init__(self):
        """Initialize an empty stack."""
        self._stack: list[Command] = []
        self._pointer = -1
        self._listeners: list[StackListener] = []

    @property
    def stack(self) -> list[Command]:
        return list(self._stack)

    @property
    def pointer(self) -> int:
        return self._pointer

    @property
    def can_undo(self) -> bool:
        return self._pointer > -1

    @property
    def can_redo(self) -> bool:
        return self._pointer < len(self._stack) - 1

    @property
    def current(self) -> Command | None:
        """The most recently applied command."""
        if self._pointer == -1:
            return None
        return self._stack[self._pointer]

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, command: Command, execute_forward: bool = True) -> None:
        """Push a command, discarding any redo tail.

        Args:
            command: The command to push.
            execute_forward: Whether to apply the forward effect now. Pass
                False when the effect was already applied live; it is still
                replayed on redo.
        """
        if self._pointer != len(self._stack) - 1:
            discarded = len(self._stack) - (self._pointer + 1)
            del self._stack[self._pointer + 1:]
            logger.debug("Discarded %d redoable command(s)", discarded)

        self._stack.append(command)
        self._pointer = len(self._stack) - 1
        logger.debug("Pushed command %r", command.display_text)

        if execute_forward:
            command.forward(command.data)
        self._notify()

    def undo(self) -> bool:
        """Revert the current command.

        Returns:
            False (and logs an error) if there is nothing to undo.
        """
        if self._pointer == -1:
            logger.error("Can't undo because the stack is empty")
            return False
        command = self._stack[self._pointer]
        command.backward(command.data)
        self._pointer -= 1
        logger.debug("Undid command %r", command.display_text)
        self._notify()
        return True

    def redo(self) -> bool:
        """Re-apply the next command in the redo tail.

        Returns:
            False (and logs an error) if there is nothing to redo.
        """
        if self._pointer == len(self._stack) - 1:
            logger.error("Can't redo because we're at the top of the stack")
            return False
        self._pointer += 1
        command = self._stack[self._pointer]
        command.forward(command.data)
        logger.debug("Redid command %r", command.display_text)
        self._notify()
        return True

    def clear(self) -> None:
        """Empty the stack."""
        self._stack = []
        self._pointer = -1
        self._notify()

    def reset(self) -> None:
        """Same as ``clear``."""
        self.clear()

    def history(self) -> list[HistoryEntry]:
        """Get the stack from newest to oldest."""
        return [
            HistoryEntry(
                command_id=command.id,
                display_text=command.display_text,
                applied=index <= self._pointer,
                is_current=index == self._pointer,
            )
            for index, command in reversed(list(enumerate(self._stack)))
        ]

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: StackListener) -> None:
        """Register a callback fired after every push, undo, redo and clear."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
