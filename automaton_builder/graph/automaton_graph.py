"""Arena-of-entities graph holding the automaton being edited."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, TypeVar

import networkx as nx

from ..schema.models import (
    SerializedState,
    SerializedToken,
    SerializedTransition,
    Snapshot,
)
from .entities import LayoutPriority, Position, State, Token, Transition

logger = logging.getLogger(__name__)

_V = TypeVar("_V")


class GraphIntegrityError(Exception):
    """Raised when the graph violates one of its structural invariants."""

    def __init__(self, message: str, problems: list[str] | None = None):
        self.problems = problems or []
        super().__init__(message)


@dataclass
class RemovedObjects:
    """Everything taken out of the graph by one removal, with original indices."""

    states: list[tuple[int, State]] = field(default_factory=list)
    transitions: list[tuple[int, Transition]] = field(default_factory=list)
    start_state_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.states and not self.transitions


def _insert_at(mapping: dict[str, _V], key: str, value: _V, index: int | None) -> dict[str, _V]:
    if index is None or index >= len(mapping):
        mapping[key] = value
        return mapping
    items = list(mapping.items())
    items.insert(max(index, 0), (key, value))
    return dict(items)


class AutomatonGraph:
    """States, transitions and alphabet of an automaton, keyed by id.

    Transitions refer to states and tokens by id only. Every mutator treats
    an unknown id as a no-op so that replaying undo/redo over stale ids
    stays total.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self._states: dict[str, State] = {}
        self._transitions: dict[str, Transition] = {}
        self._alphabet: dict[str, Token] = {}
        self._start_state_id: str | None = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def states(self) -> list[State]:
        return list(self._states.values())

    @property
    def transitions(self) -> list[Transition]:
        return list(self._transitions.values())

    @property
    def alphabet(self) -> list[Token]:
        return list(self._alphabet.values())

    @property
    def start_state_id(self) -> str | None:
        return self._start_state_id

    @property
    def start_state(self) -> State | None:
        if self._start_state_id is None:
            return None
        return self._states.get(self._start_state_id)

    def get_state(self, state_id: str) -> State | None:
        return self._states.get(state_id)

    def get_transition(self, transition_id: str) -> Transition | None:
        return self._transitions.get(transition_id)

    def get_token(self, token_id: str) -> Token | None:
        return self._alphabet.get(token_id)

    def has_state(self, state_id: str) -> bool:
        return state_id in self._states

    def state_index(self, state_id: str) -> int:
        return list(self._states).index(state_id)

    def transition_index(self, transition_id: str) -> int:
        return list(self._transitions).index(transition_id)

    def token_index(self, token_id: str) -> int:
        return list(self._alphabet).index(token_id)

    def transitions_between(self, a: str, b: str) -> list[Transition]:
        """Get transitions joining the unordered pair {a, b}, in creation order."""
        return [t for t in self._transitions.values() if t.connects(a, b)]

    def transitions_involving(self, state_id: str) -> list[Transition]:
        return [t for t in self._transitions.values() if t.involves(state_id)]

    def find_transition(self, source_id: str, dest_id: str) -> Transition | None:
        """Get the first transition with exactly this ordered (source, dest)."""
        for transition in self._transitions.values():
            if transition.source_id == source_id and transition.dest_id == dest_id:
                return transition
        return None

    def ordered_tokens(self, transition: Transition) -> list[Token]:
        """Get a transition's tokens in alphabet order."""
        return [tok for tok in self._alphabet.values() if tok.id in transition.tokens]

    # -------------------------------------------------------------------------
    # States
    # -------------------------------------------------------------------------

    def add_state(
        self,
        label: str,
        position: Position | None = None,
        state_id: str | None = None,
        is_accept: bool = False,
    ) -> State:
        """Create a state and append it to the graph.

        Args:
            label: The human-readable label.
            position: Canvas position; defaults to the origin.
            state_id: Id to use instead of a freshly allocated one.
            is_accept: Whether the state is accepting.

        Returns:
            The new state.
        """
        state = State(label=label, position=position or Position(), is_accept=is_accept)
        if state_id is not None:
            state.id = state_id
        self._states[state.id] = state
        logger.debug("Added state %s (%s)", state.label, state.id)
        return state

    def insert_state(self, state: State, index: int | None = None) -> None:
        """Put an existing state object back into the graph at the given index."""
        self._states = _insert_at(self._states, state.id, state, index)

    def remove_state(self, state_id: str) -> RemovedObjects:
        """Remove a state together with every transition touching it."""
        return self.remove_objects([state_id], [])

    def rename_state(self, state_id: str, label: str) -> None:
        state = self._states.get(state_id)
        if state is not None:
            state.label = label

    def set_accept(self, state_id: str, is_accept: bool) -> None:
        state = self._states.get(state_id)
        if state is not None:
            state.is_accept = is_accept

    def set_start(self, state_id: str | None) -> None:
        """Set the start state, or clear it with ``None``. Unknown ids are ignored."""
        if state_id is None or state_id in self._states:
            self._start_state_id = state_id

    def set_position(self, state_id: str, position: Position) -> None:
        state = self._states.get(state_id)
        if state is not None:
            state.position = position

    def translate_states(self, state_ids: Iterable[str], dx: float, dy: float) -> None:
        """Offset a batch of states by the same delta."""
        for state_id in dict.fromkeys(state_ids):
            state = self._states.get(state_id)
            if state is not None:
                state.position = state.position.translated(dx, dy)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def add_transition(
        self,
        source_id: str,
        dest_id: str,
        is_epsilon: bool = False,
        tokens: Iterable[str] | None = None,
        transition_id: str | None = None,
    ) -> Transition | None:
        """Create a transition between two existing states.

        The first transition between an unordered pair of states is straight.
        Any later one is curved, and every straight transition already
        joining the pair is flipped to curved.

        Returns:
            The new transition, or None if either endpoint is missing.
        """
        if source_id not in self._states or dest_id not in self._states:
            logger.debug("Ignoring transition to missing state %s -> %s", source_id, dest_id)
            return None

        existing = self.transitions_between(source_id, dest_id)
        if existing:
            priority = LayoutPriority.CURVE
            for peer in existing:
                peer.layout_priority = LayoutPriority.CURVE
        else:
            priority = LayoutPriority.STRAIGHT

        transition = Transition(
            source_id=source_id,
            dest_id=dest_id,
            tokens={t for t in (tokens or ()) if t in self._alphabet},
            is_epsilon=is_epsilon,
            layout_priority=priority,
        )
        if transition_id is not None:
            transition.id = transition_id
        self._transitions[transition.id] = transition
        return transition

    def insert_transition(self, transition: Transition, index: int | None = None) -> None:
        """Put an existing transition object back, keeping its layout priority."""
        if transition.source_id not in self._states or transition.dest_id not in self._states:
            return
        self._transitions = _insert_at(self._transitions, transition.id, transition, index)

    def remove_transition(self, transition_id: str) -> Transition | None:
        """Remove a transition. Pairs that were curved stay curved."""
        return self._transitions.pop(transition_id, None)

    def set_layout_priority(self, transition_id: str, priority: LayoutPriority) -> None:
        transition = self._transitions.get(transition_id)
        if transition is not None:
            transition.layout_priority = priority

    def transition_add_token(self, transition_id: str, token_id: str) -> None:
        transition = self._transitions.get(transition_id)
        if transition is not None and token_id in self._alphabet:
            transition.tokens.add(token_id)

    def transition_remove_token(self, transition_id: str, token_id: str) -> None:
        transition = self._transitions.get(transition_id)
        if transition is not None:
            transition.tokens.discard(token_id)

    def set_epsilon(self, transition_id: str, is_epsilon: bool) -> None:
        transition = self._transitions.get(transition_id)
        if transition is not None:
            transition.is_epsilon = is_epsilon

    # -------------------------------------------------------------------------
    # Alphabet
    # -------------------------------------------------------------------------

    def add_token(self, symbol: str = "", token_id: str | None = None) -> Token:
        """Append a token to the alphabet. The symbol starts empty by default."""
        token = Token(symbol=symbol)
        if token_id is not None:
            token.id = token_id
        self._alphabet[token.id] = token
        return token

    def insert_token(self, token: Token, index: int | None = None) -> None:
        self._alphabet = _insert_at(self._alphabet, token.id, token, index)

    def remove_token(self, token_id: str) -> list[str]:
        """Remove a token and strip it from every transition.

        Returns:
            Ids of the transitions that were using the token.
        """
        if self._alphabet.pop(token_id, None) is None:
            return []
        stripped = []
        for transition in self._transitions.values():
            if token_id in transition.tokens:
                transition.tokens.discard(token_id)
                stripped.append(transition.id)
        return stripped

    def set_token_symbol(self, token_id: str, symbol: str) -> None:
        token = self._alphabet.get(token_id)
        if token is not None:
            token.symbol = symbol

    # -------------------------------------------------------------------------
    # Batch removal and restoration
    # -------------------------------------------------------------------------

    def remove_objects(
        self, state_ids: Iterable[str], transition_ids: Iterable[str]
    ) -> RemovedObjects:
        """Remove states (cascading to their transitions) and transitions.

        Returns:
            The removed entities with their former indices, suitable for
            ``restore_objects``.
        """
        state_ids = {s for s in state_ids if s in self._states}
        doomed = {t for t in transition_ids if t in self._transitions}
        for transition in self._transitions.values():
            if transition.source_id in state_ids or transition.dest_id in state_ids:
                doomed.add(transition.id)

        removed = RemovedObjects(
            states=[
                (index, state)
                for index, state in enumerate(self._states.values())
                if state.id in state_ids
            ],
            transitions=[
                (index, transition)
                for index, transition in enumerate(self._transitions.values())
                if transition.id in doomed
            ],
        )

        for transition_id in doomed:
            del self._transitions[transition_id]
        for state_id in state_ids:
            del self._states[state_id]

        if self._start_state_id in state_ids:
            removed.start_state_id = self._start_state_id
            self._start_state_id = None

        if not removed.is_empty:
            logger.debug(
                "Removed %d state(s) and %d transition(s)",
                len(removed.states),
                len(removed.transitions),
            )
        return removed

    def restore_objects(self, removed: RemovedObjects) -> None:
        """Undo a ``remove_objects`` call, restoring original positions."""
        for index, state in sorted(removed.states, key=lambda item: item[0]):
            self.insert_state(state, index)
        for index, transition in sorted(removed.transitions, key=lambda item: item[0]):
            self.insert_transition(transition, index)
        if removed.start_state_id is not None:
            self.set_start(removed.start_state_id)

    def clear(self) -> None:
        """Remove every entity and the start state."""
        self._states = {}
        self._transitions = {}
        self._alphabet = {}
        self._start_state_id = None

    # -------------------------------------------------------------------------
    # Integrity and export
    # -------------------------------------------------------------------------

    def find_integrity_problems(self) -> list[str]:
        """List violations of the structural invariants (normally empty)."""
        problems = []
        for transition in self._transitions.values():
            for state_id in (transition.source_id, transition.dest_id):
                if state_id not in self._states:
                    problems.append(
                        f"Transition {transition.id} references missing state {state_id}"
                    )
            for token_id in transition.tokens:
                if token_id not in self._alphabet:
                    problems.append(
                        f"Transition {transition.id} references missing token {token_id}"
                    )
        if self._start_state_id is not None and self._start_state_id not in self._states:
            problems.append(f"Start state {self._start_state_id} does not exist")
        return problems

    def check_integrity(self) -> None:
        """Raise GraphIntegrityError if any structural invariant is broken."""
        problems = self.find_integrity_problems()
        if problems:
            raise GraphIntegrityError(
                f"Graph has {len(problems)} integrity problem(s)", problems
            )

    def to_networkx(self) -> nx.MultiDiGraph:
        """Export the graph as a networkx MultiDiGraph keyed by transition id."""
        graph = nx.MultiDiGraph()
        for state in self._states.values():
            graph.add_node(
                state.id,
                label=state.label,
                is_accept=state.is_accept,
                is_start=state.id == self._start_state_id,
                x=state.position.x,
                y=state.position.y,
            )
        for transition in self._transitions.values():
            graph.add_edge(
                transition.source_id,
                transition.dest_id,
                key=transition.id,
                tokens=[tok.symbol for tok in self.ordered_tokens(transition)],
                is_epsilon=transition.is_epsilon,
            )
        return graph

    def to_snapshot(self) -> Snapshot:
        """Project the graph into its serialized form."""
        return Snapshot(
            states=[
                SerializedState(id=s.id, x=s.position.x, y=s.position.y, label=s.label)
                for s in self._states.values()
            ],
            alphabet=[SerializedToken(id=t.id, symbol=t.symbol) for t in self._alphabet.values()],
            transitions=[
                SerializedTransition(
                    id=t.id,
                    source=t.source_id,
                    dest=t.dest_id,
                    is_epsilon_transition=t.is_epsilon,
                    tokens=[tok.id for tok in self.ordered_tokens(t)],
                )
                for t in self._transitions.values()
            ],
            start_state=self._start_state_id,
            accept_states=[s.id for s in self._states.values() if s.is_accept],
        )

    def load_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the graph contents with a snapshot, keeping original ids.

        Transitions go through ``add_transition`` so that parallel pairs
        come back curved.
        """
        self.clear()
        accept_ids = set(snapshot.accept_states)
        for s in snapshot.states:
            self.add_state(
                s.label,
                Position(s.x, s.y),
                state_id=s.id,
                is_accept=s.id in accept_ids,
            )
        for tok in snapshot.alphabet:
            self.add_token(tok.symbol, token_id=tok.id)
        for t in snapshot.transitions:
            self.add_transition(
                t.source,
                t.dest,
                is_epsilon=t.is_epsilon_transition,
                tokens=t.tokens,
                transition_id=t.id,
            )

        if snapshot.start_state is not None:
            if snapshot.start_state in self._states:
                self._start_state_id = snapshot.start_state
            else:
                logger.warning("Start state %s not found in snapshot", snapshot.start_state)
