"""Entity types for the automaton graph."""

import uuid
from dataclasses import dataclass, field
from enum import Enum


def new_id() -> str:
    """Allocate a fresh opaque entity id."""
    return str(uuid.uuid4())


class LayoutPriority(str, Enum):
    """How a transition arrow is drawn between two distinct states."""

    STRAIGHT = "straight"
    CURVE = "curve"


@dataclass
class Position:
    """A point on the canvas."""

    x: float = 0.0
    y: float = 0.0

    def translated(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass
class Token:
    """An alphabet symbol. Identity is the id; the symbol is freely editable."""

    id: str = field(default_factory=new_id)
    symbol: str = ""


@dataclass
class State:
    """A node of the automaton."""

    label: str
    position: Position = field(default_factory=Position)
    is_accept: bool = False
    id: str = field(default_factory=new_id)


@dataclass
class Transition:
    """A directed edge between two states, accepting a set of token ids."""

    source_id: str
    dest_id: str
    tokens: set[str] = field(default_factory=set)
    is_epsilon: bool = False
    layout_priority: LayoutPriority = LayoutPriority.STRAIGHT
    id: str = field(default_factory=new_id)

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.dest_id

    def involves(self, state_id: str) -> bool:
        """Check if the given state is either endpoint of this transition."""
        return self.source_id == state_id or self.dest_id == state_id

    def connects(self, a: str, b: str) -> bool:
        """Check if this transition joins the unordered pair {a, b}."""
        return (self.source_id == a and self.dest_id == b) or (
            self.source_id == b and self.dest_id == a
        )
