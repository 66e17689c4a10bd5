"""Determinism validators: start state, transition coverage, ε-transitions."""

from ..automaton.projector import RunnableAutomaton
from .base import ValidationResult


def check_start_state(automaton: RunnableAutomaton) -> ValidationResult:
    """Check that the automaton has a start state."""
    result = ValidationResult()
    if automaton.start is None:
        result.add_error(
            code="NO_START_STATE",
            message="Automaton has no start state",
        )
    return result


def check_transition_coverage(automaton: RunnableAutomaton) -> ValidationResult:
    """Check that every (state, symbol) pair has exactly one transition.

    Empty symbols are skipped here; they are reported by the alphabet
    validator.

    Args:
        automaton: The projected automaton.

    Returns:
        ValidationResult with one error per missing or duplicated pair.
    """
    result = ValidationResult()
    table = automaton.transition_table()

    for state in automaton.distinct_states:
        for symbol in automaton.distinct_symbols:
            if symbol == "":
                continue
            count = len(table.get((state, symbol), []))
            if count == 0:
                result.add_error(
                    code="MISSING_TRANSITION",
                    message=f'State "{state}" has no transition for token "{symbol}"',
                    state=state,
                    symbol=symbol,
                )
            elif count > 1:
                result.add_error(
                    code="MULTIPLE_TRANSITIONS",
                    message=f'State "{state}" has multiple transitions for token "{symbol}"',
                    state=state,
                    symbol=symbol,
                    count=count,
                )

    return result


def check_epsilon_transitions(automaton: RunnableAutomaton) -> ValidationResult:
    """Report ε-transitions, which a DFA may not have."""
    result = ValidationResult()
    if automaton.epsilon_transitions:
        result.add_error(
            code="EPSILON_TRANSITION",
            message="Transitions on empty string (ε) not allowed in DFA",
            count=len(automaton.epsilon_transitions),
        )
    return result
