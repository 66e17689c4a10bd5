"""Transition arrow layout."""

from .geometry import (
    EPSILON_LABEL,
    ArrowGeometry,
    ArrowKind,
    Point,
    curved_geometry,
    label_text,
    self_loop_geometry,
    straight_geometry,
    transition_geometry,
)
from .engine import LayoutEngine

__all__ = [
    "EPSILON_LABEL",
    "ArrowGeometry",
    "ArrowKind",
    "Point",
    "curved_geometry",
    "label_text",
    "self_loop_geometry",
    "straight_geometry",
    "transition_geometry",
    "LayoutEngine",
]
