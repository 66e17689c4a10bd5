"""Copy, cut and paste of states and transitions."""

import copy
from dataclasses import dataclass, field

from .automaton_graph import AutomatonGraph, RemovedObjects
from .entities import Position, State, Transition, new_id


@dataclass
class Selection:
    """The states and transitions a UI currently has selected."""

    state_ids: list[str] = field(default_factory=list)
    transition_ids: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.state_ids and not self.transition_ids

    def __len__(self) -> int:
        return len(self.state_ids) + len(self.transition_ids)


@dataclass
class Clipboard:
    """Detached copies of copied states and transitions."""

    states: list[State] = field(default_factory=list)
    transitions: list[Transition] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.states and not self.transitions


@dataclass
class PasteResult:
    """The entities created by a paste."""

    states: list[State] = field(default_factory=list)
    transitions: list[Transition] = field(default_factory=list)


def copy_selection(
    graph: AutomatonGraph, selection: Selection, include_selected_transitions: bool = True
) -> Clipboard:
    """Copy the selection, adding every transition between two selected states.

    Args:
        graph: The graph to copy from.
        selection: The selected state and transition ids.
        include_selected_transitions: Whether directly selected transitions are
            copied even when their endpoints are not both selected.

    Returns:
        A clipboard holding deep copies; later edits to the graph do not
        affect it.
    """
    wanted_states = set(selection.state_ids)
    selected_states = [state for state in graph.states if state.id in wanted_states]
    state_ids = {state.id for state in selected_states}

    wanted = set(selection.transition_ids) if include_selected_transitions else set()
    transitions = [
        t
        for t in graph.transitions
        if t.id in wanted or (t.source_id in state_ids and t.dest_id in state_ids)
    ]

    return Clipboard(
        states=copy.deepcopy(selected_states),
        transitions=copy.deepcopy(transitions),
    )


def plan_paste(
    graph: AutomatonGraph, clipboard: Clipboard, offset_x: float, offset_y: float
) -> PasteResult:
    """Build fresh entities for a paste without touching the graph.

    Every pasted state gets a new id; transition endpoints and tokens are
    remapped through an id-substitution map. A transition is only planned
    when both of its endpoints are part of the paste, and tokens no longer in
    the alphabet are dropped.
    """
    substitutions: dict[str, str] = {}
    result = PasteResult()

    for original in clipboard.states:
        pasted = State(
            label=original.label,
            position=original.position.translated(offset_x, offset_y),
            is_accept=original.is_accept,
        )
        substitutions[original.id] = pasted.id
        result.states.append(pasted)

    for tok in graph.alphabet:
        substitutions[tok.id] = tok.id

    for original in clipboard.transitions:
        source_id = substitutions.get(original.source_id)
        dest_id = substitutions.get(original.dest_id)
        if source_id is None or dest_id is None:
            continue
        result.transitions.append(
            Transition(
                source_id=source_id,
                dest_id=dest_id,
                tokens={substitutions[t] for t in original.tokens if t in substitutions},
                is_epsilon=original.is_epsilon,
                id=new_id(),
            )
        )

    return result


def apply_paste(graph: AutomatonGraph, planned: PasteResult) -> PasteResult:
    """Insert planned paste entities into the graph.

    Transitions go through ``add_transition`` so pairs pasted with parallel
    transitions get curved.
    """
    result = PasteResult()
    for state in planned.states:
        result.states.append(
            graph.add_state(
                state.label,
                Position(state.position.x, state.position.y),
                state_id=state.id,
                is_accept=state.is_accept,
            )
        )
    for transition in planned.transitions:
        added = graph.add_transition(
            transition.source_id,
            transition.dest_id,
            is_epsilon=transition.is_epsilon,
            tokens=transition.tokens,
            transition_id=transition.id,
        )
        if added is not None:
            result.transitions.append(added)
    return result


def paste(
    graph: AutomatonGraph, clipboard: Clipboard, offset_x: float = 20.0, offset_y: float = 20.0
) -> PasteResult:
    """Paste a clipboard into the graph at the given offset."""
    return apply_paste(graph, plan_paste(graph, clipboard, offset_x, offset_y))


def removal_targets(graph: AutomatonGraph, selection: Selection) -> tuple[list[str], list[str]]:
    """Resolve which states and transitions removing a selection takes out.

    Selected states take every transition touching them. Directly selected
    transitions are kept on the list even when neither endpoint is selected.
    """
    state_ids = [s for s in selection.state_ids if graph.has_state(s)]
    transition_ids = [
        t for t in selection.transition_ids if graph.get_transition(t) is not None
    ]
    for state_id in state_ids:
        for transition in graph.transitions_involving(state_id):
            if transition.id not in transition_ids:
                transition_ids.append(transition.id)
    return state_ids, transition_ids


def cut(graph: AutomatonGraph, selection: Selection) -> tuple[Clipboard, RemovedObjects]:
    """Copy the selection, then remove it from the graph.

    Returns:
        The clipboard and the removed entities.
    """
    clipboard = copy_selection(graph, selection)
    state_ids, transition_ids = removal_targets(graph, selection)
    return clipboard, graph.remove_objects(state_ids, transition_ids)
