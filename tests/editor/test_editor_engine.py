"""Tests for the editing facade."""

from unittest.mock import MagicMock

import pytest

from automaton_builder.automaton.runner import RunnerStatus
from automaton_builder.config import EditorSettings
from automaton_builder.editor.engine import EditorEngine
from automaton_builder.graph.clipboard import Selection
from automaton_builder.graph.entities import LayoutPriority, Position


def texts(engine: EditorEngine) -> list[str]:
    return [entry.display_text for entry in engine.history()]


@pytest.fixture
def loaded(engine, two_state_data):
    engine.load(two_state_data)
    return engine


class TestStates:
    def test_default_labels_and_first_start(self, engine):
        first = engine.add_state(0, 0)
        second = engine.add_state(100, 0)

        assert engine.graph.get_state(first).label == "q0"
        assert engine.graph.get_state(second).label == "q1"
        assert engine.graph.start_state_id == first
        assert texts(engine) == ['Add "q1"', 'Add "q0"']

    def test_explicit_label_does_not_consume_number(self, engine):
        engine.add_state(0, 0, label="start")
        state_id = engine.add_state(0, 0)

        assert engine.graph.get_state(state_id).label == "q0"

    def test_snap_to_grid(self):
        engine = EditorEngine(settings=EditorSettings(snap_to_grid=True))

        state_id = engine.add_state(74, 126)

        assert engine.graph.get_state(state_id).position == Position(50, 150)

    def test_undo_add_state_clears_start(self, engine):
        engine.add_state(0, 0)

        engine.undo()

        assert engine.graph.states == []
        assert engine.graph.start_state_id is None

    def test_rename_accept_and_start(self, loaded):
        loaded.rename_state("s0", "begin")
        loaded.set_accept("s0", True)
        loaded.set_start("s1")

        assert texts(loaded) == [
            'Set "q1" As Initial Node',
            'Mark "begin" as Accepting',
            'Rename "q0" To "begin"',
        ]

        loaded.undo()
        loaded.undo()
        loaded.undo()
        state = loaded.graph.get_state("s0")
        assert (state.label, state.is_accept) == ("q0", False)
        assert loaded.graph.start_state_id == "s0"

    def test_clear_start(self, loaded):
        assert loaded.set_start(None)

        assert loaded.graph.start_state_id is None
        assert texts(loaded) == ['Set "none" As Initial Node']

    def test_unknown_ids_push_nothing(self, loaded):
        assert not loaded.remove_state("missing")
        assert not loaded.rename_state("missing", "x")
        assert not loaded.set_start("missing")
        assert not loaded.remove_transition("missing")
        assert not loaded.remove_token("missing")

        assert loaded.history() == []

    def test_remove_state_and_undo(self, loaded):
        before = loaded.save()

        loaded.remove_state("s1")
        assert loaded.graph.transitions == []
        assert texts(loaded) == ['Delete Node "q1"']

        loaded.undo()
        assert loaded.save() == before


class TestMoves:
    def test_move_states(self, loaded):
        loaded.move_states(["s0", "s1"], 10, 20)

        assert loaded.graph.get_state("s0").position == Position(110, 120)
        assert texts(loaded) == ["Move 2 Nodes"]

        loaded.undo()
        assert loaded.graph.get_state("s1").position == Position(300, 100)

    def test_drag_is_one_command(self, loaded):
        loaded.begin_drag(["s0"])
        loaded.drag_states(5, 0)
        loaded.drag_states(5, 5)
        command = loaded.end_drag()

        assert command is not None
        assert loaded.graph.get_state("s0").position == Position(110, 105)
        assert texts(loaded) == ['Move "q0"']

        loaded.undo()
        assert loaded.graph.get_state("s0").position == Position(100, 100)

        loaded.redo()
        assert loaded.graph.get_state("s0").position == Position(110, 105)

    def test_drag_without_movement_pushes_nothing(self, loaded):
        loaded.begin_drag(["s0"])

        assert loaded.end_drag() is None
        assert loaded.history() == []


class TestTransitions:
    def test_add_transition(self, loaded):
        transition_id = loaded.add_transition("s1", "s1", tokens=["tok-a"])

        assert loaded.graph.get_transition(transition_id).tokens == {"tok-a"}
        assert texts(loaded) == ['Add Transition from "q1" to "q1"']

    def test_add_transition_missing_endpoint(self, loaded):
        assert loaded.add_transition("s0", "missing") is None
        assert loaded.history() == []

    def test_curve_pairing_and_undo(self, loaded):
        back = loaded.add_transition("s1", "s0")
        third = loaded.add_transition("s0", "s1")

        graph = loaded.graph
        assert graph.get_transition("t0").layout_priority == LayoutPriority.CURVE
        assert graph.get_transition(back).layout_priority == LayoutPriority.CURVE
        assert graph.get_transition(third).layout_priority == LayoutPriority.CURVE

        loaded.undo()
        loaded.undo()
        assert graph.get_transition("t0").layout_priority == LayoutPriority.STRAIGHT

    def test_connect_selects_existing(self, loaded):
        listener = MagicMock()
        loaded.on_selection_changed = listener

        result = loaded.connect("s0", "s1")

        assert result == "t0"
        assert loaded.history() == []
        listener.assert_called_once_with(Selection(transition_ids=["t0"]))

    def test_connect_creates_new(self, loaded):
        result = loaded.connect("s1", "s0")

        assert result != "t0"
        assert len(loaded.graph.transitions) == 2

    def test_token_and_epsilon_texts(self, loaded):
        loaded.transition_remove_token("t0", "tok-a")
        loaded.transition_add_token("t0", "tok-a")
        loaded.set_epsilon("t0", True)
        loaded.set_epsilon("t0", False)

        assert texts(loaded) == [
            'Don\'t Use ε For Transition "q0" To "q1"',
            'Use ε For Transition "q0" To "q1"',
            'Use Token "a" For Transition "q0" To "q1"',
            'Don\'t Use Token "a" For Transition "q0" To "q1"',
        ]

    def test_remove_transition(self, loaded):
        loaded.remove_transition("t0")

        assert loaded.graph.transitions == []
        assert texts(loaded) == ['Remove Transition "q0" To "q1"']


class TestAlphabet:
    def test_add_token_defaults_empty(self, engine):
        token_id = engine.add_token()

        assert engine.graph.get_token(token_id).symbol == ""
        assert texts(engine) == ["Add Token"]

    def test_rename_token(self, loaded):
        loaded.set_token_symbol("tok-a", "b")

        assert loaded.graph.get_token("tok-a").symbol == "b"
        assert texts(loaded) == ['Rename Token "a" To "b"']

    def test_remove_token_and_undo(self, loaded):
        loaded.remove_token("tok-a")
        assert loaded.graph.get_transition("t0").tokens == set()

        loaded.undo()
        assert loaded.graph.get_transition("t0").tokens == {"tok-a"}


class TestClipboard:
    def test_copy_paste(self, loaded):
        listener = MagicMock()
        loaded.on_selection_changed = listener
        loaded.copy(Selection(state_ids=["s0", "s1"]))

        result = loaded.paste()

        assert len(result.states) == 2
        assert len(result.transitions) == 1
        assert {s.id for s in result.states}.isdisjoint({"s0", "s1"})
        assert result.states[0].position == Position(120, 120)
        assert texts(loaded) == ["Paste 2 Objects"]
        listener.assert_called_once_with(Selection(state_ids=[s.id for s in result.states]))

    def test_paste_undo_redo(self, loaded):
        loaded.copy(Selection(state_ids=["s0"]))
        result = loaded.paste()

        loaded.undo()
        assert len(loaded.graph.states) == 2

        loaded.redo()
        assert loaded.graph.has_state(result.states[0].id)

    def test_paste_empty_clipboard(self, engine):
        assert engine.paste() is None
        assert engine.history() == []

    def test_cut(self, loaded):
        clipboard = loaded.cut(Selection(state_ids=["s1"]))

        assert [s.id for s in clipboard.states] == ["s1"]
        assert not loaded.graph.has_state("s1")
        assert loaded.graph.transitions == []
        assert texts(loaded) == ["Cut 1 Object"]

        loaded.undo()
        assert loaded.graph.get_transition("t0") is not None

    def test_cut_then_paste(self, loaded):
        loaded.cut(Selection(state_ids=["s0", "s1"]))
        assert texts(loaded) == ["Cut 3 Objects"]

        result = loaded.paste()

        assert len(loaded.graph.states) == 2
        assert len(result.transitions) == 1

    def test_cut_empty_selection(self, loaded):
        assert loaded.cut(Selection()) is None
        assert loaded.history() == []

    def test_delete_selected(self, loaded):
        assert loaded.delete_selected(Selection(transition_ids=["t0"]))

        assert texts(loaded) == ["Delete 1 Object"]
        assert len(loaded.graph.states) == 2


class TestHistory:
    def test_push_after_undo_discards_tail(self, engine):
        for _ in range(4):
            engine.add_state(0, 0)
        engine.undo()
        engine.undo()

        engine.add_token("a")

        assert len(engine.stack) == 3
        assert not engine.stack.can_redo

    def test_undo_all_redo_all(self, engine):
        a = engine.add_state(0, 0)
        b = engine.add_state(100, 0)
        token = engine.add_token("x")
        engine.add_transition(a, b, tokens=[token])
        engine.add_transition(b, a)
        engine.set_accept(b, True)
        engine.remove_state(a)
        final = engine.save()

        while engine.undo():
            pass
        assert engine.graph.states == []

        while engine.redo():
            pass
        assert engine.save() == final

    def test_listener(self, engine):
        listener = MagicMock()
        engine.subscribe(listener)

        engine.add_state(0, 0)
        engine.undo()

        assert listener.call_count == 2


class TestMachine:
    def test_load_bumps_label_counter(self, loaded):
        state_id = loaded.add_state(0, 0)

        assert loaded.graph.get_state(state_id).label == "q2"

    def test_load_resets_history(self, engine, two_state_data):
        engine.add_state(0, 0)

        engine.load(two_state_data)

        assert engine.history() == []
        assert not engine.undo()

    def test_clear_machine(self, loaded):
        loaded.add_state(0, 0)

        loaded.clear_machine()

        assert loaded.graph.states == []
        assert loaded.history() == []
        assert loaded.graph.get_state(loaded.add_state(0, 0)).label == "q0"

    def test_save_and_load_file(self, loaded, tmp_path):
        path = loaded.save_file(tmp_path / "machine.json")
        other = EditorEngine()

        other.load_file(path)

        assert other.save() == loaded.save()


class TestAnalysis:
    def test_validate_two_state_example(self, loaded):
        result = loaded.validate()

        assert len(result.issues) == 1
        issue = result.issues[0]
        assert (issue.code, issue.state, issue.symbol) == ("MISSING_TRANSITION", "q1", "a")
        assert loaded.run(["a"]) == RunnerStatus.ACCEPTED
        assert loaded.run(["b"]) == RunnerStatus.INVALID_INPUT_TOKENS

    def test_test_string(self, engine, complete_dfa_data):
        engine.load(complete_dfa_data)

        assert engine.test_string("ab") == RunnerStatus.ACCEPTED
        assert engine.test_string("ba") == RunnerStatus.REJECTED

    def test_arrow_geometry_follows_edits(self, loaded):
        before = loaded.arrow_geometry("t0")

        loaded.move_states(["s1"], 0, 100)

        after = loaded.arrow_geometry("t0")
        assert after is not before
        assert after.points[-1] != before.points[-1]

    def test_arrow_layout_after_remove(self, loaded):
        loaded.arrow_layout()

        loaded.remove_transition("t0")

        assert loaded.arrow_layout() == {}
        assert loaded.arrow_geometry("t0") is None
