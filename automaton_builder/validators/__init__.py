"""Validators for the projected automaton."""

from .base import Severity, ValidationIssue, ValidationResult
from .alphabet import check_alphabet, check_state_labels
from .determinism import (
    check_epsilon_transitions,
    check_start_state,
    check_transition_coverage,
)
from .reachability import (
    check_unreachable_accept_states,
    check_unreachable_states,
    get_reachable_states,
)
from .runner import run_validators, validate_graph, validate_snapshot_file

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "check_alphabet",
    "check_state_labels",
    "check_epsilon_transitions",
    "check_start_state",
    "check_transition_coverage",
    "check_unreachable_accept_states",
    "check_unreachable_states",
    "get_reachable_states",
    "run_validators",
    "validate_graph",
    "validate_snapshot_file",
]
