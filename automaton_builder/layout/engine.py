"""Cached arrow layout for every transition of a graph."""

from typing import Iterable

from ..config import EditorSettings
from ..graph.automaton_graph import AutomatonGraph
from ..graph.entities import Transition
from .geometry import ArrowGeometry, Point, label_text, transition_geometry


class LayoutEngine:
    """Computes arrow geometry per transition and caches it.

    A cached entry is reused only while its inputs (both endpoint positions,
    the layout priority and the label text) are unchanged, so moving a
    state or editing a transition's tokens or epsilon flag recomputes it.
    """

    def __init__(self, settings: EditorSettings | None = None):
        self.settings = settings or EditorSettings()
        self._cache: dict[str, tuple[tuple, ArrowGeometry]] = {}
        self.recompute_count = 0

    def label_for(self, graph: AutomatonGraph, transition: Transition) -> str:
        symbols = [tok.symbol for tok in graph.ordered_tokens(transition)]
        return label_text(symbols, transition.is_epsilon)

    def geometry(self, graph: AutomatonGraph, transition_id: str) -> ArrowGeometry | None:
        """Get the arrow geometry for one transition.

        Returns:
            The geometry, or None if the transition or an endpoint is gone.
        """
        transition = graph.get_transition(transition_id)
        if transition is None:
            self._cache.pop(transition_id, None)
            return None
        source = graph.get_state(transition.source_id)
        dest = graph.get_state(transition.dest_id)
        if source is None or dest is None:
            return None

        label = self.label_for(graph, transition)
        signature = (
            source.position.x,
            source.position.y,
            dest.position.x,
            dest.position.y,
            transition.layout_priority,
            transition.is_self_loop,
            label,
        )
        cached = self._cache.get(transition_id)
        if cached is not None and cached[0] == signature:
            return cached[1]

        result = transition_geometry(
            Point(source.position.x, source.position.y),
            Point(dest.position.x, dest.position.y),
            transition.layout_priority,
            transition.is_self_loop,
            self.settings,
        )
        result.label = label
        self._cache[transition_id] = (signature, result)
        self.recompute_count += 1
        return result

    def layout(self, graph: AutomatonGraph) -> dict[str, ArrowGeometry]:
        """Get geometry for every transition, dropping cache entries for removed ones."""
        self.prune(graph)
        layout = {}
        for transition in graph.transitions:
            result = self.geometry(graph, transition.id)
            if result is not None:
                layout[transition.id] = result
        return layout

    def invalidate(self, transition_ids: Iterable[str] | None = None) -> None:
        """Forget cached geometry for some transitions, or all with ``None``."""
        if transition_ids is None:
            self._cache.clear()
            return
        for transition_id in transition_ids:
            self._cache.pop(transition_id, None)

    def prune(self, graph: AutomatonGraph) -> None:
        live = {t.id for t in graph.transitions}
        for transition_id in [t for t in self._cache if t not in live]:
            del self._cache[transition_id]
