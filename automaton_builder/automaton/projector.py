"""Projection of the editing graph into a runnable automaton over labels."""

from collections import defaultdict
from dataclasses import dataclass, field

from ..graph.automaton_graph import AutomatonGraph
from ..schema.models import Snapshot


@dataclass(frozen=True)
class ProjectedTransition:
    """One (source, symbol, dest) triple. Parts are None for unresolved ids."""

    source: str | None
    symbol: str | None
    dest: str | None


@dataclass
class RunnableAutomaton:
    """A deterministic-automaton view of the graph, keyed by labels and symbols.

    Several states may share a label; every lookup by label resolves to the
    first one, so such states collapse into one.
    """

    alphabet: list[str] = field(default_factory=list)
    states: list[str] = field(default_factory=list)
    start: str | None = None
    accept: list[str] = field(default_factory=list)
    transitions: list[ProjectedTransition] = field(default_factory=list)
    epsilon_transitions: list[tuple[str | None, str | None]] = field(default_factory=list)

    @property
    def distinct_states(self) -> list[str]:
        return list(dict.fromkeys(self.states))

    @property
    def distinct_symbols(self) -> list[str]:
        return list(dict.fromkeys(self.alphabet))

    def transition_table(self) -> dict[tuple[str | None, str | None], list[str | None]]:
        """Map each (state, symbol) pair to the destinations it leads to."""
        table: dict[tuple[str | None, str | None], list[str | None]] = defaultdict(list)
        for t in self.transitions:
            table[(t.source, t.symbol)].append(t.dest)
        return dict(table)

    def nondeterministic_pairs(self) -> list[tuple[str | None, str | None]]:
        """Get (state, symbol) pairs with more than one outgoing transition."""
        return [pair for pair, dests in self.transition_table().items() if len(dests) > 1]

    def is_runnable(self) -> bool:
        """Check the conditions the runner needs: a start, no ε, no branching."""
        if self.start is None or self.start not in self.states:
            return False
        if self.epsilon_transitions:
            return False
        return not self.nondeterministic_pairs()


def convert_id_to_label(element_id: str | None, snapshot: Snapshot) -> str | None:
    """Resolve a state or token id to its label or symbol.

    Returns:
        The state label or token symbol (states are searched first), or None
        if the id is not found.
    """
    if element_id is None:
        return None
    state = snapshot.get_state(element_id)
    if state is not None:
        return state.label
    token = snapshot.get_token(element_id)
    if token is not None:
        return token.symbol
    return None


def project(graph: AutomatonGraph) -> RunnableAutomaton:
    """Build a RunnableAutomaton from the current graph."""
    snapshot = graph.to_snapshot()

    def label(element_id: str | None) -> str | None:
        return convert_id_to_label(element_id, snapshot)

    automaton = RunnableAutomaton(
        alphabet=[tok.symbol for tok in snapshot.alphabet],
        states=[s.label for s in snapshot.states],
        start=label(snapshot.start_state),
        accept=[label(state_id) for state_id in snapshot.accept_states],
    )

    for t in snapshot.transitions:
        source = label(t.source)
        dest = label(t.dest)
        for token_id in t.tokens:
            automaton.transitions.append(ProjectedTransition(source, label(token_id), dest))
        if t.is_epsilon_transition:
            automaton.epsilon_transitions.append((source, dest))

    return automaton
