"""Step-by-step execution of a projected automaton over an input string."""

import logging
from enum import Enum
from typing import Sequence

from .projector import RunnableAutomaton

logger = logging.getLogger(__name__)


class RunnerStatus(str, Enum):
    """Where a run currently stands."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    INVALID_DFA = "Invalid DFA"
    INVALID_INPUT_TOKENS = "Invalid Input Tokens"

    @property
    def is_final(self) -> bool:
        return self not in (RunnerStatus.NOT_STARTED, RunnerStatus.IN_PROGRESS)


class DFARunner:
    """Feeds input symbols through an automaton one at a time.

    Construction settles into ``INVALID_DFA`` if the automaton has no start,
    has ε-transitions or branches on some (state, symbol) pair, and into
    ``INVALID_INPUT_TOKENS`` if any input symbol is outside the alphabet.
    A missing transition rejects the input when it is reached.
    """

    def __init__(self, automaton: RunnableAutomaton, input_symbols: Sequence[str]):
        self.automaton = automaton
        self.input = list(input_symbols)
        self.position = 0
        self.current_state: str | None = None
        self.path: list[str] = []
        self._table = automaton.transition_table()

        if not automaton.is_runnable():
            self.status = RunnerStatus.INVALID_DFA
        elif any(symbol not in automaton.alphabet for symbol in self.input):
            self.status = RunnerStatus.INVALID_INPUT_TOKENS
        else:
            self.status = RunnerStatus.NOT_STARTED
            self.current_state = automaton.start
            self.path.append(automaton.start)

    @property
    def remaining(self) -> list[str]:
        return self.input[self.position:]

    def step(self) -> RunnerStatus:
        """Consume one symbol, or settle the result once input is exhausted."""
        if self.status.is_final:
            return self.status
        self.status = RunnerStatus.IN_PROGRESS

        if self.position < len(self.input):
            symbol = self.input[self.position]
            dests = self._table.get((self.current_state, symbol))
            if not dests:
                logger.debug("No transition from %s on %r", self.current_state, symbol)
                self.status = RunnerStatus.REJECTED
                return self.status
            self.current_state = dests[0]
            self.path.append(self.current_state)
            self.position += 1
            if self.position < len(self.input):
                return self.status

        if self.current_state in self.automaton.accept:
            self.status = RunnerStatus.ACCEPTED
        else:
            self.status = RunnerStatus.REJECTED
        return self.status

    def run_until_conclusion(self) -> RunnerStatus:
        while not self.status.is_final:
            self.step()
        return self.status


def run(automaton: RunnableAutomaton, input_symbols: Sequence[str]) -> RunnerStatus:
    """Run an input to completion and return the final status."""
    return DFARunner(automaton, input_symbols).run_until_conclusion()
