"""
Edge generator - produces untrimmed left/right edge curves for wide paths.

Every path in a network must have its edges generated before any node is
reconciled: reconciliation reads neighbouring edges and assumes they are the
plain offsets of their spines.

Main API:
    EdgeGenerator.generate_initial_edges(path, graph)
    EdgeGenerator.curve_initial_edges(path, graph)
    EdgeGenerator.generate_all(paths, graph, apply_end_pinch=True)
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Sequence

import logging

from widepath.elements.wp_curve import Arc, Curve
from widepath.profiling import profile

if TYPE_CHECKING:
    from widepath.elements.wp_graph import GeometryGraph
    from widepath.elements.wp_path import WidePath

logger = logging.getLogger(__name__)


class EdgeGenerator:
    """Builds the initial edge curves of wide paths."""

    @staticmethod
    def generate_initial_edges(path: WidePath, graph: GeometryGraph) -> None:
        """
        Set path.right_edge / path.left_edge to parallel offsets of the spine.

        The right edge is offset by +right_offset (right of travel) and the
        left edge by -left_offset. Both are registered with the graph. A path
        without a spine is skipped. An offset with no curve (e.g. wider than
        the radius of an arc spine) leaves that edge as None and logs a warning;
        the reconciler skips pairs with a missing edge.
        """
        if path.spine is None:
            logger.debug("Skipping edge generation for %r: no spine", path)
            return

        if path.right_edge is not None:
            graph.remove_curve(path.right_edge)
        if path.left_edge is not None:
            graph.remove_curve(path.left_edge)

        path.right_edge = _offset_edge(path, path.right_offset, "right", graph)
        path.left_edge = _offset_edge(path, -path.left_offset, "left", graph)

    @staticmethod
    def curve_initial_edges(path: WidePath, graph: GeometryGraph) -> None:
        """
        Replace pinched edges with arcs.

        For each side with a positive end pinch, both ends of that edge are
        pulled towards the spine by min(pinch, offset) and the edge becomes the
        arc through those two points and the original edge midpoint.
        """
        if path.spine is None:
            return
        path.right_edge = _pinched(path.spine, path.right_edge, path.right_offset,
                                   path.right_end_pinch, graph)
        path.left_edge = _pinched(path.spine, path.left_edge, path.left_offset,
                                  path.left_end_pinch, graph)

    @staticmethod
    @profile("generate_edges")
    def generate_all(paths: Sequence[WidePath], graph: GeometryGraph, apply_end_pinch: bool = True) -> None:
        """Generate (and optionally pinch) the edges of every path."""
        for path in paths:
            EdgeGenerator.generate_initial_edges(path, graph)
            if apply_end_pinch:
                EdgeGenerator.curve_initial_edges(path, graph)


def _offset_edge(path: WidePath, distance: float, side: str, graph: GeometryGraph) -> Optional[Curve]:
    try:
        edge = path.spine.offset(distance)
    except ValueError as e:
        logger.warning("No %s edge for %r: %s", side, path, e)
        return None
    return graph.add_curve(edge)


def _pinched(spine: Curve, edge: Optional[Curve], offset: float, pinch: float,
             graph: GeometryGraph) -> Optional[Curve]:
    if edge is None or pinch <= 0.0 or offset <= 0.0:
        return edge

    pull = min(pinch, offset)
    to_spine_start = (spine.start_point - edge.start_point) / offset
    to_spine_end = (spine.end_point - edge.end_point) / offset
    start = edge.start_point + to_spine_start * pull
    end = edge.end_point + to_spine_end * pull

    try:
        arc = Arc.through_points(start, edge.point_at(0.5), end)
    except ValueError:
        # Pinched ends collinear with the midpoint (e.g. curved spine); keep the offset
        logger.debug("Pinch of %s on %r gives no arc, keeping straight edge", pinch, edge)
        return edge

    graph.remove_curve(edge)
    return graph.add_curve(arc)
