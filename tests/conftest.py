"""Shared fixtures for tests."""

import json
from pathlib import Path

import pytest

from automaton_builder.config import EditorSettings
from automaton_builder.editor.engine import EditorEngine
from automaton_builder.graph.automaton_graph import AutomatonGraph
from automaton_builder.schema.loader import parse_snapshot_data


@pytest.fixture
def settings() -> EditorSettings:
    """Return default editor settings."""
    return EditorSettings()


@pytest.fixture
def engine(settings) -> EditorEngine:
    """Return an engine over an empty automaton."""
    return EditorEngine(settings=settings)


@pytest.fixture
def graph() -> AutomatonGraph:
    """Return an empty graph."""
    return AutomatonGraph()


@pytest.fixture
def two_state_data() -> dict:
    """Return a snapshot: q0 (start) --a--> q1 (accept), q1 has no outgoing a."""
    return {
        "states": [
            {"id": "s0", "x": 100, "y": 100, "label": "q0"},
            {"id": "s1", "x": 300, "y": 100, "label": "q1"},
        ],
        "alphabet": [{"id": "tok-a", "symbol": "a"}],
        "transitions": [
            {
                "id": "t0",
                "source": "s0",
                "dest": "s1",
                "isEpsilonTransition": False,
                "tokens": ["tok-a"],
            }
        ],
        "startState": "s0",
        "acceptStates": ["s1"],
    }


@pytest.fixture
def complete_dfa_data() -> dict:
    """Return a complete DFA over {a, b} accepting strings ending in 'b'."""
    return {
        "states": [
            {"id": "s0", "x": 100, "y": 100, "label": "q0"},
            {"id": "s1", "x": 300, "y": 100, "label": "q1"},
        ],
        "alphabet": [
            {"id": "tok-a", "symbol": "a"},
            {"id": "tok-b", "symbol": "b"},
        ],
        "transitions": [
            {"id": "t0", "source": "s0", "dest": "s0", "tokens": ["tok-a"]},
            {"id": "t1", "source": "s0", "dest": "s1", "tokens": ["tok-b"]},
            {"id": "t2", "source": "s1", "dest": "s0", "tokens": ["tok-a"]},
            {"id": "t3", "source": "s1", "dest": "s1", "tokens": ["tok-b"]},
        ],
        "startState": "s0",
        "acceptStates": ["s1"],
    }


@pytest.fixture
def two_state_graph(two_state_data) -> AutomatonGraph:
    """Return a graph loaded from the two-state snapshot."""
    graph = AutomatonGraph()
    graph.load_snapshot(parse_snapshot_data(two_state_data))
    return graph


@pytest.fixture
def complete_dfa_graph(complete_dfa_data) -> AutomatonGraph:
    graph = AutomatonGraph()
    graph.load_snapshot(parse_snapshot_data(complete_dfa_data))
    return graph


@pytest.fixture
def write_snapshot(tmp_path):
    """Return a helper that writes snapshot data to a JSON file."""

    def _write(data: dict, name: str = "automaton.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
