"""Arrow geometry for straight, curved and self-looping transitions."""

import math
from dataclasses import dataclass
from enum import Enum

from ..config import EditorSettings
from ..graph.entities import LayoutPriority

EPSILON_LABEL = "ε"


class ArrowKind(str, Enum):
    STRAIGHT = "straight"
    CURVE = "curve"
    LOOP = "loop"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class ArrowGeometry:
    """Points an arrow passes through, its tension and where its label goes.

    ``label_anchor`` is the point the label is laid out around: the control
    point for curves, the label position otherwise.
    """

    kind: ArrowKind
    points: list[Point]
    tension: float
    label_position: Point
    label_anchor: Point
    label: str = ""

    def flat_points(self) -> list[float]:
        """Points as ``[x0, y0, x1, y1, ...]`` for canvas polyline APIs."""
        return [coord for p in self.points for coord in (p.x, p.y)]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "points": self.flat_points(),
            "tension": self.tension,
            "label": self.label,
            "labelPosition": [self.label_position.x, self.label_position.y],
        }


def label_text(symbols: list[str], is_epsilon: bool) -> str:
    """Build the label shown on an arrow: ε first, then token symbols."""
    parts = [EPSILON_LABEL] if is_epsilon else []
    parts.extend(symbols)
    return ",".join(parts)


def self_loop_geometry(center: Point, settings: EditorSettings) -> ArrowGeometry:
    """Loop above a node, leaving and re-entering at the loop angle.

    The five points are: exit on the boundary, exit pushed outward, apex
    above the node, entry pushed outward, entry just off the boundary.
    """
    angle = math.radians(settings.loop_angle_degrees)
    radius = settings.node_radius
    dist = settings.loop_distance
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)

    apex = Point(center.x, center.y - radius - dist * 1.5)
    points = [
        Point(center.x + radius * cos_a, center.y - radius * sin_a),
        Point(center.x + (radius + dist) * cos_a, center.y - (radius + dist) * sin_a),
        apex,
        Point(center.x - (radius + dist) * cos_a, center.y - (radius + dist) * sin_a),
        Point(
            center.x - (radius + settings.arrow_padding) * cos_a,
            center.y - (radius + settings.arrow_padding) * sin_a,
        ),
    ]
    label_position = Point(apex.x, apex.y - settings.loop_label_offset)
    return ArrowGeometry(
        kind=ArrowKind.LOOP,
        points=points,
        tension=0.0,
        label_position=label_position,
        label_anchor=label_position,
    )


def curved_geometry(src: Point, dst: Point, settings: EditorSettings) -> ArrowGeometry:
    """Arc bowed to one side so two opposite arrows between a pair don't overlap."""
    angle = math.atan2(dst.y - src.y, dst.x - src.x)
    radius = settings.node_radius
    reach = radius + settings.arrow_padding
    mid = Point((src.x + dst.x) / 2, (src.y + dst.y) / 2)
    normal_x = math.cos(angle + math.pi / 2)
    normal_y = math.sin(angle + math.pi / 2)

    control = Point(
        mid.x + settings.curve_size * normal_x,
        mid.y + settings.curve_size * normal_y,
    )
    points = [
        Point(
            src.x + radius * math.cos(angle + math.pi / 8),
            src.y + radius * math.sin(angle + math.pi / 8),
        ),
        control,
        Point(
            dst.x - reach * math.cos(angle - math.pi / 8),
            dst.y - reach * math.sin(angle - math.pi / 8),
        ),
    ]
    text_offset = settings.curve_size + settings.curve_label_offset
    return ArrowGeometry(
        kind=ArrowKind.CURVE,
        points=points,
        tension=settings.curve_tension,
        label_position=Point(mid.x + text_offset * normal_x, mid.y + text_offset * normal_y),
        label_anchor=control,
    )


def straight_geometry(src: Point, dst: Point, settings: EditorSettings) -> ArrowGeometry:
    """Straight arrow from the source center, stopping short of the destination."""
    dx = dst.x - src.x
    dy = dst.y - src.y
    magnitude = math.hypot(dx, dy)
    reach = settings.node_radius + settings.arrow_padding
    if magnitude == 0:
        ux = uy = 0.0
    else:
        ux = dx / magnitude * reach
        uy = dy / magnitude * reach

    end = Point(dst.x - ux, dst.y - uy)
    label_position = Point(
        ((src.x + ux) + end.x) / 2,
        ((src.y + uy) + end.y) / 2,
    )
    return ArrowGeometry(
        kind=ArrowKind.STRAIGHT,
        points=[Point(src.x, src.y), end],
        tension=0.0,
        label_position=label_position,
        label_anchor=label_position,
    )


def transition_geometry(
    src: Point,
    dst: Point,
    priority: LayoutPriority,
    is_self_loop: bool,
    settings: EditorSettings,
) -> ArrowGeometry:
    """Pick the arrow shape for a transition and compute it."""
    if is_self_loop:
        return self_loop_geometry(src, settings)
    if priority == LayoutPriority.CURVE:
        return curved_geometry(src, dst, settings)
    return straight_geometry(src, dst, settings)
