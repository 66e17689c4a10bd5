"""Alphabet and label validators."""

from collections import Counter

from ..automaton.projector import RunnableAutomaton
from .base import ValidationResult


def check_alphabet(automaton: RunnableAutomaton) -> ValidationResult:
    """Check the alphabet is non-empty, has no empty symbols and no repeats."""
    result = ValidationResult()

    if not automaton.alphabet:
        result.add_error(
            code="EMPTY_ALPHABET",
            message="Alphabet needs at least one token",
        )
        return result

    if "" in automaton.alphabet:
        result.add_error(
            code="EMPTY_SYMBOL",
            message="Invalid token: Empty string detected.",
            symbol="",
        )

    for symbol, count in Counter(automaton.alphabet).items():
        if symbol != "" and count > 1:
            result.add_error(
                code="DUPLICATE_SYMBOL",
                message=f'Token "{symbol}" is repeated in alphabet',
                symbol=symbol,
                count=count,
            )

    return result


def check_state_labels(automaton: RunnableAutomaton) -> ValidationResult:
    """Check every state label is unique."""
    result = ValidationResult()
    for label, count in Counter(automaton.states).items():
        if count > 1:
            result.add_error(
                code="DUPLICATE_STATE_LABEL",
                message=f'State label "{label}" is used by {count} states',
                state=label,
                count=count,
            )
    return result
