"""Tests for the entity arena graph."""

import pytest

from automaton_builder.graph.automaton_graph import AutomatonGraph, GraphIntegrityError
from automaton_builder.graph.entities import LayoutPriority, Position, Transition


class TestStates:
    def test_add_state(self, graph):
        state = graph.add_state("q0", Position(10, 20))

        assert graph.get_state(state.id) is state
        assert state.position == Position(10, 20)
        assert not state.is_accept

    def test_add_state_with_explicit_id(self, graph):
        state = graph.add_state("q0", state_id="fixed")

        assert state.id == "fixed"
        assert graph.has_state("fixed")

    def test_states_keep_insertion_order(self, graph):
        labels = ["q0", "q1", "q2"]
        for label in labels:
            graph.add_state(label)

        assert [s.label for s in graph.states] == labels

    def test_rename_and_accept(self, graph):
        state = graph.add_state("q0")

        graph.rename_state(state.id, "start")
        graph.set_accept(state.id, True)

        assert state.label == "start"
        assert state.is_accept

    def test_set_start_ignores_unknown_id(self, graph):
        state = graph.add_state("q0")
        graph.set_start(state.id)

        graph.set_start("missing")

        assert graph.start_state_id == state.id

    def test_set_start_none_clears(self, graph):
        state = graph.add_state("q0")
        graph.set_start(state.id)

        graph.set_start(None)

        assert graph.start_state is None

    def test_translate_states(self, graph):
        a = graph.add_state("a", Position(0, 0))
        b = graph.add_state("b", Position(10, 10))

        graph.translate_states([a.id, b.id, a.id], 5, -5)

        assert a.position == Position(5, -5)
        assert b.position == Position(15, 5)

    def test_mutators_ignore_unknown_ids(self, graph):
        graph.rename_state("missing", "x")
        graph.set_accept("missing", True)
        graph.set_position("missing", Position(1, 1))
        graph.transition_add_token("missing", "missing")
        graph.set_epsilon("missing", True)
        graph.set_token_symbol("missing", "x")

        assert graph.states == []
        assert graph.transitions == []


class TestTransitions:
    def test_add_transition_requires_endpoints(self, graph):
        a = graph.add_state("a")

        assert graph.add_transition(a.id, "missing") is None
        assert graph.transitions == []

    def test_first_transition_is_straight(self, graph):
        a = graph.add_state("a")
        b = graph.add_state("b")

        t = graph.add_transition(a.id, b.id)

        assert t.layout_priority == LayoutPriority.STRAIGHT

    def test_opposite_transition_curves_both(self, graph):
        a = graph.add_state("a")
        b = graph.add_state("b")
        first = graph.add_transition(a.id, b.id)

        second = graph.add_transition(b.id, a.id)

        assert first.layout_priority == LayoutPriority.CURVE
        assert second.layout_priority == LayoutPriority.CURVE

    def test_third_transition_is_curved(self, graph):
        a = graph.add_state("a")
        b = graph.add_state("b")
        graph.add_transition(a.id, b.id)
        graph.add_transition(b.id, a.id)

        third = graph.add_transition(a.id, b.id)

        assert third.layout_priority == LayoutPriority.CURVE
        assert all(
            t.layout_priority == LayoutPriority.CURVE for t in graph.transitions
        )

    def test_removing_transition_keeps_peer_curved(self, graph):
        a = graph.add_state("a")
        b = graph.add_state("b")
        first = graph.add_transition(a.id, b.id)
        second = graph.add_transition(b.id, a.id)

        graph.remove_transition(second.id)

        assert first.layout_priority == LayoutPriority.CURVE

    def test_tokens_filtered_to_alphabet(self, graph):
        a = graph.add_state("a")
        tok = graph.add_token("x")

        t = graph.add_transition(a.id, a.id, tokens=[tok.id, "bogus"])

        assert t.tokens == {tok.id}
        assert t.is_self_loop

    def test_find_transition_is_directional(self, graph):
        a = graph.add_state("a")
        b = graph.add_state("b")
        t = graph.add_transition(a.id, b.id)

        assert graph.find_transition(a.id, b.id) is t
        assert graph.find_transition(b.id, a.id) is None

    def test_ordered_tokens_follow_alphabet(self, graph):
        a = graph.add_state("a")
        x = graph.add_token("x")
        y = graph.add_token("y")
        t = graph.add_transition(a.id, a.id, tokens=[y.id, x.id])

        assert [tok.symbol for tok in graph.ordered_tokens(t)] == ["x", "y"]


class TestAlphabet:
    def test_add_token_defaults_to_empty_symbol(self, graph):
        tok = graph.add_token()

        assert tok.symbol == ""
        assert graph.alphabet == [tok]

    def test_remove_token_strips_transitions(self, graph):
        a = graph.add_state("a")
        tok = graph.add_token("x")
        t = graph.add_transition(a.id, a.id, tokens=[tok.id])

        stripped = graph.remove_token(tok.id)

        assert stripped == [t.id]
        assert t.tokens == set()
        assert graph.find_integrity_problems() == []

    def test_remove_unknown_token(self, graph):
        assert graph.remove_token("missing") == []


class TestRemoval:
    def test_remove_state_cascades(self, two_state_graph):
        removed = two_state_graph.remove_state("s1")

        assert not two_state_graph.has_state("s1")
        assert two_state_graph.transitions == []
        assert [t.id for _, t in removed.transitions] == ["t0"]

    def test_remove_start_state_clears_start(self, two_state_graph):
        removed = two_state_graph.remove_state("s0")

        assert two_state_graph.start_state_id is None
        assert removed.start_state_id == "s0"

    def test_restore_objects_round_trip(self, two_state_graph):
        before = two_state_graph.to_snapshot()

        removed = two_state_graph.remove_objects(["s0"], [])
        two_state_graph.restore_objects(removed)

        assert two_state_graph.to_snapshot() == before

    def test_restore_keeps_original_positions(self, graph):
        states = [graph.add_state(f"q{i}") for i in range(4)]

        removed = graph.remove_objects([states[1].id, states[3].id], [])
        graph.restore_objects(removed)

        assert [s.id for s in graph.states] == [s.id for s in states]

    def test_clear(self, two_state_graph):
        two_state_graph.clear()

        assert two_state_graph.states == []
        assert two_state_graph.alphabet == []
        assert two_state_graph.start_state_id is None


class TestIntegrity:
    def test_loaded_graph_is_consistent(self, two_state_graph):
        two_state_graph.check_integrity()

    def test_dangling_transition_is_reported(self, graph):
        a = graph.add_state("a")
        graph.insert_transition(Transition(source_id=a.id, dest_id=a.id, tokens={"ghost"}))

        with pytest.raises(GraphIntegrityError) as exc_info:
            graph.check_integrity()

        assert len(exc_info.value.problems) == 1
        assert "ghost" in exc_info.value.problems[0]


class TestSnapshots:
    def test_load_snapshot(self, two_state_graph):
        assert [s.label for s in two_state_graph.states] == ["q0", "q1"]
        assert two_state_graph.start_state_id == "s0"
        assert two_state_graph.get_state("s1").is_accept
        assert two_state_graph.get_transition("t0").tokens == {"tok-a"}

    def test_snapshot_round_trip(self, complete_dfa_data, complete_dfa_graph):
        snapshot = complete_dfa_graph.to_snapshot()
        reloaded = AutomatonGraph()
        reloaded.load_snapshot(snapshot)

        assert reloaded.to_snapshot() == snapshot
        assert snapshot.start_state == complete_dfa_data["startState"]

    def test_load_curves_parallel_pairs(self, complete_dfa_graph):
        assert complete_dfa_graph.get_transition("t1").layout_priority == LayoutPriority.CURVE
        assert complete_dfa_graph.get_transition("t2").layout_priority == LayoutPriority.CURVE
        assert complete_dfa_graph.get_transition("t0").layout_priority == LayoutPriority.STRAIGHT

    def test_unknown_start_state_is_dropped(self, two_state_data, caplog):
        from automaton_builder.schema.models import Snapshot

        two_state_data["startState"] = "nowhere"
        graph = AutomatonGraph()

        graph.load_snapshot(Snapshot.model_validate(two_state_data))

        assert graph.start_state_id is None
        assert "nowhere" in caplog.text

    def test_to_networkx(self, complete_dfa_graph):
        nx_graph = complete_dfa_graph.to_networkx()

        assert nx_graph.number_of_nodes() == 2
        assert nx_graph.number_of_edges() == 4
        assert nx_graph.nodes["s0"]["is_start"]
        assert nx_graph.edges["s0", "s1", "t1"]["tokens"] == ["b"]
