"""State reachability validators."""

import networkx as nx

from ..automaton.projector import RunnableAutomaton
from .base import ValidationResult


def build_label_graph(automaton: RunnableAutomaton) -> nx.MultiDiGraph:
    """Build a graph over state labels with one edge per projected transition.

    ε-transitions are included; they still connect states even though they
    are invalid in a DFA.
    """
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(automaton.distinct_states)
    for t in automaton.transitions:
        if t.source is not None and t.dest is not None:
            graph.add_edge(t.source, t.dest, symbol=t.symbol)
    for source, dest in automaton.epsilon_transitions:
        if source is not None and dest is not None:
            graph.add_edge(source, dest, symbol=None)
    return graph


def get_reachable_states(automaton: RunnableAutomaton) -> set[str]:
    """Get all state labels reachable from the start state (including it)."""
    if automaton.start is None:
        return set()
    graph = build_label_graph(automaton)
    if automaton.start not in graph:
        return set()
    return {automaton.start} | nx.descendants(graph, automaton.start)


def check_unreachable_states(automaton: RunnableAutomaton) -> ValidationResult:
    """Warn about states that cannot be reached from the start state.

    Skipped when there is no start state; that is reported on its own.
    """
    result = ValidationResult()
    if automaton.start is None:
        return result

    reachable = get_reachable_states(automaton)
    for state in automaton.distinct_states:
        if state not in reachable:
            result.add_warning(
                code="UNREACHABLE_STATE",
                message=f'State "{state}" is inaccessible',
                state=state,
            )
    return result


def check_unreachable_accept_states(automaton: RunnableAutomaton) -> ValidationResult:
    """Warn about accept states that can never be reached."""
    result = ValidationResult()
    if automaton.start is None:
        return result

    reachable = get_reachable_states(automaton)
    accept_states = list(dict.fromkeys(a for a in automaton.accept if a is not None))
    unreachable = [a for a in accept_states if a not in reachable]
    always_rejects = bool(accept_states) and len(unreachable) == len(accept_states)

    for state in unreachable:
        message = f'Accept state "{state}" is inaccessible'
        if always_rejects:
            message += "; automaton will always reject"
        result.add_warning(
            code="UNREACHABLE_ACCEPT_STATE",
            message=message,
            state=state,
        )
    return result
