"""Tagged command variants and the dispatcher that applies them to a graph.

Each variant is a plain dataclass carrying only the data its operation
needs. Fields filled in while applying (removed entities, flipped peers,
prior values) live on the same record so the backward direction can read
them.
"""

import copy
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar

from ..graph.automaton_graph import AutomatonGraph, RemovedObjects
from ..graph.clipboard import PasteResult, apply_paste
from ..graph.entities import LayoutPriority, Position, Token
from .command_stack import Command


def _plain(value: Any) -> Any:
    """Convert captured data into JSON-compatible values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(_plain(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class CommandVariant:
    """Base class for command variants."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> dict[str, Any]:
        """Dump the variant and its captured data as JSON-compatible values."""
        return {"kind": self.kind, **_plain(dataclasses.asdict(self))}


@dataclass
class AddState(CommandVariant):
    kind: ClassVar[str] = "addState"

    state_id: str
    label: str
    x: float
    y: float
    became_start: bool = False


@dataclass
class RemoveState(CommandVariant):
    kind: ClassVar[str] = "removeState"

    state_id: str
    removed: RemovedObjects | None = None


@dataclass
class RenameState(CommandVariant):
    kind: ClassVar[str] = "setNodeName"

    state_id: str
    old_label: str
    new_label: str


@dataclass
class SetAccept(CommandVariant):
    kind: ClassVar[str] = "setNodeIsAccept"

    state_id: str
    old_value: bool
    new_value: bool


@dataclass
class SetStart(CommandVariant):
    kind: ClassVar[str] = "setNodeIsStart"

    old_start: str | None
    new_start: str | None


@dataclass
class MoveStates(CommandVariant):
    kind: ClassVar[str] = "moveStates"

    state_ids: list[str]
    dx: float
    dy: float


@dataclass
class AddTransition(CommandVariant):
    kind: ClassVar[str] = "addTransition"

    transition_id: str
    source_id: str
    dest_id: str
    is_epsilon: bool = False
    tokens: list[str] = field(default_factory=list)
    flipped: list[str] = field(default_factory=list)


@dataclass
class RemoveTransition(CommandVariant):
    kind: ClassVar[str] = "removeTransition"

    transition_id: str
    removed: RemovedObjects | None = None


@dataclass
class AddToken(CommandVariant):
    kind: ClassVar[str] = "addToken"

    token_id: str
    symbol: str = ""


@dataclass
class RemoveToken(CommandVariant):
    kind: ClassVar[str] = "removeToken"

    token_id: str
    token: Token | None = None
    index: int | None = None
    stripped: list[str] = field(default_factory=list)


@dataclass
class SetTokenSymbol(CommandVariant):
    kind: ClassVar[str] = "setTokenSymbol"

    token_id: str
    old_symbol: str
    new_symbol: str


@dataclass
class TransitionAddToken(CommandVariant):
    kind: ClassVar[str] = "setTransitionAcceptsToken"

    transition_id: str
    token_id: str
    was_present: bool = False


@dataclass
class TransitionRemoveToken(CommandVariant):
    kind: ClassVar[str] = "setTransitionDoesntAcceptToken"

    transition_id: str
    token_id: str
    was_present: bool = False


@dataclass
class SetEpsilon(CommandVariant):
    kind: ClassVar[str] = "setTransitionAcceptsEpsilon"

    transition_id: str
    old_value: bool
    new_value: bool


@dataclass
class RemoveObjects(CommandVariant):
    kind: ClassVar[str] = "removeObjects"

    state_ids: list[str]
    transition_ids: list[str]
    removed: RemovedObjects | None = None


@dataclass
class PasteObjects(CommandVariant):
    kind: ClassVar[str] = "pasteClipboardObjects"

    planned: PasteResult


# -----------------------------------------------------------------------------
# Handlers
# -----------------------------------------------------------------------------


def _add_state_forward(data: AddState, graph: AutomatonGraph) -> None:
    graph.add_state(data.label, Position(data.x, data.y), state_id=data.state_id)
    data.became_start = graph.start_state_id is None
    if data.became_start:
        graph.set_start(data.state_id)


def _add_state_backward(data: AddState, graph: AutomatonGraph) -> None:
    graph.remove_state(data.state_id)


def _remove_state_forward(data: RemoveState, graph: AutomatonGraph) -> None:
    data.removed = graph.remove_state(data.state_id)


def _restore_removed(data: RemoveState | RemoveTransition | RemoveObjects, graph: AutomatonGraph) -> None:
    if data.removed is not None:
        graph.restore_objects(data.removed)


def _rename_forward(data: RenameState, graph: AutomatonGraph) -> None:
    graph.rename_state(data.state_id, data.new_label)


def _rename_backward(data: RenameState, graph: AutomatonGraph) -> None:
    graph.rename_state(data.state_id, data.old_label)


def _accept_forward(data: SetAccept, graph: AutomatonGraph) -> None:
    graph.set_accept(data.state_id, data.new_value)


def _accept_backward(data: SetAccept, graph: AutomatonGraph) -> None:
    graph.set_accept(data.state_id, data.old_value)


def _start_forward(data: SetStart, graph: AutomatonGraph) -> None:
    graph.set_start(data.new_start)


def _start_backward(data: SetStart, graph: AutomatonGraph) -> None:
    graph.set_start(data.old_start)


def _move_forward(data: MoveStates, graph: AutomatonGraph) -> None:
    graph.translate_states(data.state_ids, data.dx, data.dy)


def _move_backward(data: MoveStates, graph: AutomatonGraph) -> None:
    graph.translate_states(data.state_ids, -data.dx, -data.dy)


def _add_transition_forward(data: AddTransition, graph: AutomatonGraph) -> None:
    data.flipped = [
        t.id
        for t in graph.transitions_between(data.source_id, data.dest_id)
        if t.layout_priority == LayoutPriority.STRAIGHT
    ]
    graph.add_transition(
        data.source_id,
        data.dest_id,
        is_epsilon=data.is_epsilon,
        tokens=data.tokens,
        transition_id=data.transition_id,
    )


def _add_transition_backward(data: AddTransition, graph: AutomatonGraph) -> None:
    graph.remove_transition(data.transition_id)
    for transition_id in data.flipped:
        graph.set_layout_priority(transition_id, LayoutPriority.STRAIGHT)


def _remove_transition_forward(data: RemoveTransition, graph: AutomatonGraph) -> None:
    data.removed = graph.remove_objects([], [data.transition_id])


def _add_token_forward(data: AddToken, graph: AutomatonGraph) -> None:
    graph.add_token(data.symbol, token_id=data.token_id)


def _add_token_backward(data: AddToken, graph: AutomatonGraph) -> None:
    graph.remove_token(data.token_id)


def _remove_token_forward(data: RemoveToken, graph: AutomatonGraph) -> None:
    token = graph.get_token(data.token_id)
    if token is None:
        data.token = None
        data.stripped = []
        return
    data.token = copy.copy(token)
    data.index = graph.token_index(data.token_id)
    data.stripped = graph.remove_token(data.token_id)


def _remove_token_backward(data: RemoveToken, graph: AutomatonGraph) -> None:
    if data.token is None:
        return
    graph.insert_token(copy.copy(data.token), data.index)
    for transition_id in data.stripped:
        graph.transition_add_token(transition_id, data.token_id)


def _symbol_forward(data: SetTokenSymbol, graph: AutomatonGraph) -> None:
    graph.set_token_symbol(data.token_id, data.new_symbol)


def _symbol_backward(data: SetTokenSymbol, graph: AutomatonGraph) -> None:
    graph.set_token_symbol(data.token_id, data.old_symbol)


def _has_token(graph: AutomatonGraph, transition_id: str, token_id: str) -> bool:
    transition = graph.get_transition(transition_id)
    return transition is not None and token_id in transition.tokens


def _transition_add_token_forward(data: TransitionAddToken, graph: AutomatonGraph) -> None:
    data.was_present = _has_token(graph, data.transition_id, data.token_id)
    graph.transition_add_token(data.transition_id, data.token_id)


def _transition_add_token_backward(data: TransitionAddToken, graph: AutomatonGraph) -> None:
    if not data.was_present:
        graph.transition_remove_token(data.transition_id, data.token_id)


def _transition_remove_token_forward(data: TransitionRemoveToken, graph: AutomatonGraph) -> None:
    data.was_present = _has_token(graph, data.transition_id, data.token_id)
    graph.transition_remove_token(data.transition_id, data.token_id)


def _transition_remove_token_backward(data: TransitionRemoveToken, graph: AutomatonGraph) -> None:
    if data.was_present:
        graph.transition_add_token(data.transition_id, data.token_id)


def _epsilon_forward(data: SetEpsilon, graph: AutomatonGraph) -> None:
    graph.set_epsilon(data.transition_id, data.new_value)


def _epsilon_backward(data: SetEpsilon, graph: AutomatonGraph) -> None:
    graph.set_epsilon(data.transition_id, data.old_value)


def _remove_objects_forward(data: RemoveObjects, graph: AutomatonGraph) -> None:
    data.removed = graph.remove_objects(data.state_ids, data.transition_ids)


def _paste_forward(data: PasteObjects, graph: AutomatonGraph) -> None:
    apply_paste(graph, data.planned)


def _paste_backward(data: PasteObjects, graph: AutomatonGraph) -> None:
    graph.remove_objects(
        [s.id for s in data.planned.states],
        [t.id for t in data.planned.transitions],
    )


Handler = Callable[[Any, AutomatonGraph], None]

_HANDLERS: dict[type, tuple[Handler, Handler]] = {
    AddState: (_add_state_forward, _add_state_backward),
    RemoveState: (_remove_state_forward, _restore_removed),
    RenameState: (_rename_forward, _rename_backward),
    SetAccept: (_accept_forward, _accept_backward),
    SetStart: (_start_forward, _start_backward),
    MoveStates: (_move_forward, _move_backward),
    AddTransition: (_add_transition_forward, _add_transition_backward),
    RemoveTransition: (_remove_transition_forward, _restore_removed),
    AddToken: (_add_token_forward, _add_token_backward),
    RemoveToken: (_remove_token_forward, _remove_token_backward),
    SetTokenSymbol: (_symbol_forward, _symbol_backward),
    TransitionAddToken: (_transition_add_token_forward, _transition_add_token_backward),
    TransitionRemoveToken: (_transition_remove_token_forward, _transition_remove_token_backward),
    SetEpsilon: (_epsilon_forward, _epsilon_backward),
    RemoveObjects: (_remove_objects_forward, _restore_removed),
    PasteObjects: (_paste_forward, _paste_backward),
}


def apply(variant: CommandVariant, direction: Direction, graph: AutomatonGraph) -> None:
    """Apply a command variant to a graph in the given direction.

    Raises:
        TypeError: If the variant type has no registered handler.
    """
    try:
        forward, backward = _HANDLERS[type(variant)]
    except KeyError:
        raise TypeError(f"No handler for command variant {type(variant).__name__}") from None

    if direction == Direction.FORWARD:
        forward(variant, graph)
    else:
        backward(variant, graph)


def make_command(
    variant: CommandVariant,
    graph: AutomatonGraph,
    display_text: str,
    on_applied: Callable[[], None] | None = None,
) -> Command:
    """Wrap a variant into a stack command bound to a graph.

    Args:
        variant: The command data.
        graph: The graph the command mutates.
        display_text: Human-readable description for history views.
        on_applied: Called after every forward or backward application,
            e.g. to invalidate cached layout.
    """

    def run(direction: Direction) -> Callable[[CommandVariant], None]:
        def step(data: CommandVariant) -> None:
            apply(data, direction, graph)
            if on_applied is not None:
                on_applied()

        return step

    return Command(
        display_text=display_text,
        forward=run(Direction.FORWARD),
        backward=run(Direction.BACKWARD),
        data=variant,
    )
