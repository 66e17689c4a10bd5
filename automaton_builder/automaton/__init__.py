"""Projection of the edited graph into a runnable DFA, and its runner."""

from .projector import (
    ProjectedTransition,
    RunnableAutomaton,
    convert_id_to_label,
    project,
)
from .runner import DFARunner, RunnerStatus, run

__all__ = [
    "ProjectedTransition",
    "RunnableAutomaton",
    "convert_id_to_label",
    "project",
    "DFARunner",
    "RunnerStatus",
    "run",
]
