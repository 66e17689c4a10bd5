"""Validation runner that orchestrates all validators."""

from pathlib import Path

from ..automaton.projector import RunnableAutomaton, project
from ..graph.automaton_graph import AutomatonGraph
from ..schema.loader import parse_snapshot
from .alphabet import check_alphabet, check_state_labels
from .base import ValidationResult
from .determinism import (
    check_epsilon_transitions,
    check_start_state,
    check_transition_coverage,
)
from .reachability import check_unreachable_accept_states, check_unreachable_states


def run_validators(automaton: RunnableAutomaton) -> ValidationResult:
    """Run all validators on a projected automaton.

    Every validator runs regardless of what earlier ones found.

    Args:
        automaton: The projected automaton.

    Returns:
        Combined ValidationResult from all validators.
    """
    result = ValidationResult()

    result.merge(check_start_state(automaton))
    result.merge(check_transition_coverage(automaton))
    result.merge(check_epsilon_transitions(automaton))

    result.merge(check_alphabet(automaton))
    result.merge(check_state_labels(automaton))

    result.merge(check_unreachable_states(automaton))
    result.merge(check_unreachable_accept_states(automaton))

    return result


def validate_graph(graph: AutomatonGraph) -> ValidationResult:
    """Project a graph and validate the projection."""
    return run_validators(project(graph))


def validate_snapshot_file(path: str | Path) -> ValidationResult:
    """Load and validate a snapshot file.

    Raises:
        SnapshotLoadError: If the file cannot be loaded.
        SnapshotValidationError: If the snapshot fails schema validation.
    """
    graph = AutomatonGraph()
    graph.load_snapshot(parse_snapshot(path))
    return validate_graph(graph)
