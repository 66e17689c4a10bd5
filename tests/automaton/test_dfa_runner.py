"""Tests for the DFA runner."""

from automaton_builder.automaton.projector import project
from automaton_builder.automaton.runner import DFARunner, RunnerStatus, run


class TestRun:
    def test_partial_dfa_accepts(self, two_state_graph):
        assert run(project(two_state_graph), ["a"]) == RunnerStatus.ACCEPTED

    def test_missing_transition_rejects(self, two_state_graph):
        assert run(project(two_state_graph), ["a", "a"]) == RunnerStatus.REJECTED

    def test_symbol_outside_alphabet(self, two_state_graph):
        assert run(project(two_state_graph), ["b"]) == RunnerStatus.INVALID_INPUT_TOKENS

    def test_empty_input_on_non_accepting_start(self, two_state_graph):
        assert run(project(two_state_graph), []) == RunnerStatus.REJECTED

    def test_complete_dfa(self, complete_dfa_graph):
        automaton = project(complete_dfa_graph)

        assert run(automaton, list("aab")) == RunnerStatus.ACCEPTED
        assert run(automaton, list("aba")) == RunnerStatus.REJECTED

    def test_epsilon_makes_dfa_invalid(self, two_state_graph):
        two_state_graph.set_epsilon("t0", True)

        assert run(project(two_state_graph), ["a"]) == RunnerStatus.INVALID_DFA

    def test_branching_makes_dfa_invalid(self, two_state_graph):
        two_state_graph.add_transition("s0", "s0", tokens=["tok-a"])

        assert run(project(two_state_graph), ["a"]) == RunnerStatus.INVALID_DFA

    def test_no_start_state(self, two_state_graph):
        two_state_graph.set_start(None)

        assert run(project(two_state_graph), ["a"]) == RunnerStatus.INVALID_DFA


class TestStepping:
    def test_step_by_step(self, complete_dfa_graph):
        runner = DFARunner(project(complete_dfa_graph), ["b", "a"])
        assert runner.status == RunnerStatus.NOT_STARTED

        assert runner.step() == RunnerStatus.IN_PROGRESS
        assert runner.current_state == "q1"
        assert runner.remaining == ["a"]

        assert runner.step() == RunnerStatus.REJECTED
        assert runner.path == ["q0", "q1", "q0"]

    def test_final_status_is_sticky(self, two_state_graph):
        runner = DFARunner(project(two_state_graph), ["a"])
        runner.run_until_conclusion()

        assert runner.step() == RunnerStatus.ACCEPTED
        assert runner.status.is_final
