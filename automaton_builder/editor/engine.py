"""Editing facade: the undoable operation catalogue a UI drives."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

from ..automaton.projector import RunnableAutomaton, project
from ..automaton.runner import RunnerStatus, run
from ..config import EditorSettings
from ..graph.automaton_graph import AutomatonGraph
from ..graph.clipboard import (
    Clipboard,
    PasteResult,
    Selection,
    copy_selection,
    plan_paste,
    removal_targets,
)
from ..graph.entities import Transition, new_id
from ..history.command_stack import Command, CommandStack, HistoryEntry, StackListener
from ..history.commands import (
    AddState,
    AddToken,
    AddTransition,
    CommandVariant,
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
    make_command,
)
from ..layout.engine import LayoutEngine
from ..layout.geometry import ArrowGeometry
from ..schema.loader import parse_snapshot, parse_snapshot_data, save_snapshot
from ..schema.models import Snapshot
from ..validators.base import ValidationResult
from ..validators.runner import run_validators

logger = logging.getLogger(__name__)

SelectionListener = Callable[[Selection], None]


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


@dataclass
class _DragOperation:
    state_ids: list[str]
    dx: float = 0.0
    dy: float = 0.0


class EditorEngine:
    """Owns one graph, one command stack and the layout cache.

    Every edit goes through a command pushed on the stack, so it can be
    undone and redone. Listeners subscribed with ``subscribe`` hear about
    every push, undo, redo and clear; ``on_selection_changed`` is called
    when an operation wants the UI to change its selection.
    """

    def __init__(
        self,
        settings: EditorSettings | None = None,
        graph: AutomatonGraph | None = None,
        stack: CommandStack | None = None,
    ):
        self.settings = settings or EditorSettings()
        self.graph = graph or AutomatonGraph()
        self.stack = stack or CommandStack()
        self.layout = LayoutEngine(self.settings)
        self.clipboard = Clipboard()
        self.on_selection_changed: SelectionListener | None = None
        self._next_state_number = 0
        self._drag: _DragOperation | None = None

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def subscribe(self, listener: StackListener) -> None:
        """Register a "stack changed" listener."""
        self.stack.subscribe(listener)

    def unsubscribe(self, listener: StackListener) -> None:
        self.stack.unsubscribe(listener)

    def _push(
        self, variant: CommandVariant, display_text: str, execute_forward: bool = True
    ) -> Command:
        command = make_command(
            variant, self.graph, display_text, on_applied=self._after_apply
        )
        self.stack.push(command, execute_forward=execute_forward)
        return command

    def _after_apply(self) -> None:
        self.layout.prune(self.graph)

    def _select(self, selection: Selection) -> None:
        if self.on_selection_changed is not None:
            self.on_selection_changed(selection)

    def _state_label(self, state_id: str | None) -> str:
        state = self.graph.get_state(state_id) if state_id is not None else None
        return state.label if state is not None else "none"

    def _transition_text(self, transition: Transition) -> str:
        return (
            f'"{self._state_label(transition.source_id)}" To '
            f'"{self._state_label(transition.dest_id)}"'
        )

    def undo(self) -> bool:
        return self.stack.undo()

    def redo(self) -> bool:
        return self.stack.redo()

    def history(self) -> list[HistoryEntry]:
        return self.stack.history()

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------

    def snap(self, x: float, y: float) -> tuple[float, float]:
        """Round a position to the grid when snapping is enabled."""
        if not self.settings.snap_to_grid:
            return x, y
        spacing = self.settings.grid_spacing
        return round(x / spacing) * spacing, round(y / spacing) * spacing

    def add_state(self, x: float, y: float, label: str | None = None) -> str:
        """Add a state at a position. The first state becomes the start state.

        Args:
            x: Canvas x coordinate.
            y: Canvas y coordinate.
            label: Label to use; defaults to the next ``q<N>``.

        Returns:
            The new state's id.
        """
        x, y = self.snap(x, y)
        if label is None:
            label = f"{self.settings.state_label_prefix}{self._next_state_number}"
            self._next_state_number += 1
        variant = AddState(state_id=new_id(), label=label, x=x, y=y)
        self._push(variant, f'Add "{label}"')
        return variant.state_id

    def remove_state(self, state_id: str) -> bool:
        """Remove a state and every transition touching it."""
        state = self.graph.get_state(state_id)
        if state is None:
            return False
        self._push(RemoveState(state_id=state_id), f'Delete Node "{state.label}"')
        return True

    def rename_state(self, state_id: str, label: str) -> bool:
        state = self.graph.get_state(state_id)
        if state is None:
            return False
        self._push(
            RenameState(state_id=state_id, old_label=state.label, new_label=label),
            f'Rename "{state.label}" To "{label}"',
        )
        return True

    def set_accept(self, state_id: str, is_accept: bool) -> bool:
        state = self.graph.get_state(state_id)
        if state is None:
            return False
        self._push(
            SetAccept(state_id=state_id, old_value=state.is_accept, new_value=is_accept),
            f'Mark "{state.label}" as {"Accepting" if is_accept else "Rejecting"}',
        )
        return True

    def set_start(self, state_id: str | None) -> bool:
        """Make a state the start state, or clear the start with ``None``."""
        if state_id is not None and not self.graph.has_state(state_id):
            return False
        self._push(
            SetStart(old_start=self.graph.start_state_id, new_start=state_id),
            f'Set "{self._state_label(state_id)}" As Initial Node',
        )
        return True

    def _move_text(self, state_ids: list[str]) -> str:
        if len(state_ids) == 1:
            return f'Move "{self._state_label(state_ids[0])}"'
        return f"Move {len(state_ids)} Nodes"

    def move_states(self, state_ids: Iterable[str], dx: float, dy: float) -> bool:
        """Translate a batch of states as one undoable step."""
        ids = [s for s in dict.fromkeys(state_ids) if self.graph.has_state(s)]
        if not ids:
            return False
        self._push(MoveStates(state_ids=ids, dx=dx, dy=dy), self._move_text(ids))
        return True

    def begin_drag(self, state_ids: Iterable[str]) -> None:
        """Start a live drag of some states."""
        ids = [s for s in dict.fromkeys(state_ids) if self.graph.has_state(s)]
        self._drag = _DragOperation(state_ids=ids)

    def drag_states(self, dx: float, dy: float) -> None:
        """Move the dragged states live by an incremental delta (not undoable yet)."""
        if self._drag is None:
            return
        self.graph.translate_states(self._drag.state_ids, dx, dy)
        self._drag.dx += dx
        self._drag.dy += dy

    def end_drag(self) -> Command | None:
        """Finish a drag, recording the total move without re-applying it."""
        drag, self._drag = self._drag, None
        if drag is None or not drag.state_ids or (drag.dx == 0 and drag.dy == 0):
            return None
        return self._push(
            MoveStates(state_ids=drag.state_ids, dx=drag.dx, dy=drag.dy),
            self._move_text(drag.state_ids),
            execute_forward=False,
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def add_transition(
        self,
        source_id: str,
        dest_id: str,
        is_epsilon: bool = False,
        tokens: Iterable[str] | None = None,
    ) -> str | None:
        """Add a transition between two states.

        Returns:
            The new transition's id, or None if an endpoint does not exist.
        """
        if not self.graph.has_state(source_id) or not self.graph.has_state(dest_id):
            return None
        variant = AddTransition(
            transition_id=new_id(),
            source_id=source_id,
            dest_id=dest_id,
            is_epsilon=is_epsilon,
            tokens=[t for t in (tokens or ()) if self.graph.get_token(t) is not None],
        )
        self._push(
            variant,
            f'Add Transition from "{self._state_label(source_id)}" '
            f'to "{self._state_label(dest_id)}"',
        )
        return variant.transition_id

    def connect(self, source_id: str, dest_id: str) -> str | None:
        """Finish a drag-to-connect gesture.

        An existing transition with the same source and destination is
        selected instead of creating a duplicate.
        """
        existing = self.graph.find_transition(source_id, dest_id)
        if existing is not None:
            self._select(Selection(transition_ids=[existing.id]))
            return existing.id
        return self.add_transition(source_id, dest_id)

    def remove_transition(self, transition_id: str) -> bool:
        transition = self.graph.get_transition(transition_id)
        if transition is None:
            return False
        self._push(
            RemoveTransition(transition_id=transition_id),
            f"Remove Transition {self._transition_text(transition)}",
        )
        return True

    def transition_add_token(self, transition_id: str, token_id: str) -> bool:
        transition = self.graph.get_transition(transition_id)
        token = self.graph.get_token(token_id)
        if transition is None or token is None:
            return False
        self._push(
            TransitionAddToken(transition_id=transition_id, token_id=token_id),
            f'Use Token "{token.symbol}" For Transition {self._transition_text(transition)}',
        )
        return True

    def transition_remove_token(self, transition_id: str, token_id: str) -> bool:
        transition = self.graph.get_transition(transition_id)
        token = self.graph.get_token(token_id)
        if transition is None or token is None:
            return False
        self._push(
            TransitionRemoveToken(transition_id=transition_id, token_id=token_id),
            f"Don't Use Token \"{token.symbol}\" For Transition "
            f"{self._transition_text(transition)}",
        )
        return True

    def set_epsilon(self, transition_id: str, is_epsilon: bool) -> bool:
        transition = self.graph.get_transition(transition_id)
        if transition is None:
            return False
        verb = "Use" if is_epsilon else "Don't Use"
        self._push(
            SetEpsilon(
                transition_id=transition_id,
                old_value=transition.is_epsilon,
                new_value=is_epsilon,
            ),
            f"{verb} ε For Transition {self._transition_text(transition)}",
        )
        return True

    # -------------------------------------------------------------------------
    # Alphabet
    # -------------------------------------------------------------------------

    def add_token(self, symbol: str = "") -> str:
        """Add a token (empty symbol by default) and return its id."""
        variant = AddToken(token_id=new_id(), symbol=symbol)
        self._push(variant, "Add Token")
        return variant.token_id

    def remove_token(self, token_id: str) -> bool:
        """Remove a token, stripping it from every transition."""
        token = self.graph.get_token(token_id)
        if token is None:
            return False
        self._push(RemoveToken(token_id=token_id), f'Remove Token "{token.symbol}"')
        return True

    def set_token_symbol(self, token_id: str, symbol: str) -> bool:
        token = self.graph.get_token(token_id)
        if token is None:
            return False
        self._push(
            SetTokenSymbol(token_id=token_id, old_symbol=token.symbol, new_symbol=symbol),
            f'Rename Token "{token.symbol}" To "{symbol}"',
        )
        return True

    # -------------------------------------------------------------------------
    # Selection operations
    # -------------------------------------------------------------------------

    def copy(self, selection: Selection) -> Clipboard:
        """Copy selected states plus every transition between them."""
        self.clipboard = copy_selection(
            self.graph, selection, include_selected_transitions=False
        )
        return self.clipboard

    def paste(
        self,
        clipboard: Clipboard | None = None,
        offset: tuple[float, float] | None = None,
    ) -> PasteResult | None:
        """Paste the clipboard with fresh ids and select the new states.

        Returns:
            The created entities, or None if the clipboard is empty.
        """
        clipboard = clipboard if clipboard is not None else self.clipboard
        if clipboard.is_empty:
            logger.warning("Clipboard is empty, nothing to paste.")
            return None
        if offset is None:
            offset = (self.settings.paste_offset_x, self.settings.paste_offset_y)

        planned = plan_paste(self.graph, clipboard, offset[0], offset[1])
        self._push(
            PasteObjects(planned=planned),
            f"Paste {_plural(len(planned.states), 'Object')}",
        )
        self._select(Selection(state_ids=[s.id for s in planned.states]))
        return planned

    def delete_selected(self, selection: Selection, display_text: str | None = None) -> bool:
        """Remove selected states (with their transitions) and selected transitions."""
        state_ids, transition_ids = removal_targets(self.graph, selection)
        if not state_ids and not transition_ids:
            return False
        if display_text is None:
            display_text = f"Delete {_plural(len(state_ids) + len(transition_ids), 'Object')}"
        self._push(
            RemoveObjects(state_ids=state_ids, transition_ids=transition_ids),
            display_text,
        )
        self._select(Selection())
        return True

    def cut(self, selection: Selection) -> Clipboard | None:
        """Copy the selection to the clipboard, then remove it in one step."""
        if selection.is_empty:
            logger.warning("No objects selected, nothing to cut.")
            return None
        clipboard = copy_selection(self.graph, selection)
        total = len(clipboard.states) + len(clipboard.transitions)
        if not self.delete_selected(selection, f"Cut {_plural(total, 'Object')}"):
            return None
        self.clipboard = clipboard
        return clipboard

    # -------------------------------------------------------------------------
    # Whole-machine operations
    # -------------------------------------------------------------------------

    def clear_machine(self) -> None:
        """Empty the automaton, restart state numbering and reset the history."""
        self.graph.clear()
        self.layout.invalidate()
        self._next_state_number = 0
        self._drag = None
        self.stack.reset()

    def load(self, snapshot: Snapshot | dict[str, Any]) -> None:
        """Replace the automaton with a snapshot, keeping its ids.

        Raises:
            SnapshotValidationError: If a raw dict fails validation.
        """
        if not isinstance(snapshot, Snapshot):
            snapshot = parse_snapshot_data(snapshot)
        self.clear_machine()
        self.graph.load_snapshot(snapshot)
        self._next_state_number = self._first_free_state_number()
        logger.debug("Loaded snapshot with %d state(s)", len(snapshot.states))

    def load_file(self, path: str | Path) -> None:
        """Load a snapshot file.

        Raises:
            SnapshotLoadError: If the file cannot be loaded.
            SnapshotValidationError: If the snapshot is invalid.
        """
        self.load(parse_snapshot(path))

    def save(self) -> Snapshot:
        return self.graph.to_snapshot()

    def save_file(self, path: str | Path) -> Path:
        return save_snapshot(self.save(), path)

    def _first_free_state_number(self) -> int:
        pattern = re.compile(rf"^{re.escape(self.settings.state_label_prefix)}(\d+)$")
        numbers = [
            int(match.group(1))
            for match in (pattern.match(s.label) for s in self.graph.states)
            if match
        ]
        return max(numbers, default=-1) + 1

    # -------------------------------------------------------------------------
    # Analysis and layout
    # -------------------------------------------------------------------------

    def project(self) -> RunnableAutomaton:
        return project(self.graph)

    def validate(self) -> ValidationResult:
        return run_validators(self.project())

    def run(self, input_symbols: Sequence[str]) -> RunnerStatus:
        return run(self.project(), input_symbols)

    def test_string(self, text: str) -> RunnerStatus:
        """Run a string, one symbol per character."""
        status = self.run(list(text))
        logger.debug("Testing string %r: %s", text, status.value)
        return status

    def arrow_geometry(self, transition_id: str) -> ArrowGeometry | None:
        return self.layout.geometry(self.graph, transition_id)

    def arrow_layout(self) -> dict[str, ArrowGeometry]:
        return self.layout.layout(self.graph)
