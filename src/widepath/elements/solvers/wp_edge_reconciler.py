"""
Edge reconciler - joins the edges of paths meeting at a node.

Walks the angularly sorted spine ends at a node. For each entry i the circular
predecessor i-1 is its RIGHT neighbour and the successor i+1 its LEFT
neighbour. Each entry contributes one edge end towards each neighbour:

    entry at spine START:  towards right = right_edge.start
                           towards left  = left_edge.start
    entry at spine END:    towards right = left_edge.end
                           towards left  = right_edge.end

(left and right swap at the end of a spine because the path is then travelled
towards the node rather than away from it.)

Each adjacent pair of edge ends is joined:
    1. Already coincident within tolerance: nothing moves.
    2. Otherwise Curve.match_ends mitres both ends to the crossing of their
       end tangents. Across a reflex gap (> pi) the edge with the larger
       offset may not be trimmed, so a wide path is never cut back to the
       width of a narrow one.
    3. If no acceptable mitre exists, the edge whose end is farther from the
       node is extended onto the line through the node towards the other end.
       Parallel lines leave that end invalid (NaN) and log a warning.

Only the edge ends at the node move; the far ends and the edge shapes are
untouched, so nodes can be processed in any order.

Main API:
    report = EdgeReconciler.reconcile_node(node, entries, graph)
    reports = EdgeReconciler.reconcile_all(nodes, path_map, graph)
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import logging
import math
from dataclasses import dataclass, field

import widepath.mathutils.wp_math as WPMath
from widepath.elements.wp_curve import Curve
from widepath.elements.solvers.wp_angular_sorter import AngularEntry, AngularSorter
from widepath.profiling import perf_marker, profile
from widepath.wp_types import DEFAULT_ANGLE_TOLERANCE, DEFAULT_TOLERANCE, EdgeSide

if TYPE_CHECKING:
    from widepath.elements.wp_graph import GeometryGraph
    from widepath.elements.wp_path import WidePath
    from widepath.elements.wp_vertex import Node, Vertex

logger = logging.getLogger(__name__)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class NodeReport:
    """
    Outcome of reconciling one node. Each distinct pair of adjacent edge ends
    is counted once.

    Attributes:
        node: The node processed
        entries: Sorted spine ends at the node
        coincident: Pairs that already met (no change)
        mitred: Pairs joined by Curve.match_ends
        extended: Pairs joined by extending the farther edge
        failed: Pairs whose extension had no solution (edge end left invalid)
    """
    node: 'Node'
    entries: List[AngularEntry] = field(default_factory=list)
    coincident: int = 0
    mitred: int = 0
    extended: int = 0
    failed: int = 0

    @property
    def reconciled(self) -> bool:
        """True if the node had enough paths to be reconciled."""
        return len(self.entries) > 1


# ============================================================================
# EDGE END SELECTION
# ============================================================================

def edge_end_towards(entry: AngularEntry, side: EdgeSide) -> Tuple[Optional['Vertex'], float]:
    """
    The edge end vertex of entry's path facing its neighbour on the given side,
    and that edge's offset from the spine.
    """
    path = entry.path
    at_start = entry.vertex.is_start
    # Facing right at the start (or left at the end) is the right edge
    if (side is EdgeSide.RIGHT) == at_start:
        edge, offset = path.right_edge, path.right_offset
    else:
        edge, offset = path.left_edge, path.left_offset
    if edge is None:
        return None, offset
    return (edge.start if at_start else edge.end), offset


# ============================================================================
# RECONCILER
# ============================================================================

class EdgeReconciler:

    @staticmethod
    def reconcile_node(node: Node,
                       entries: Sequence[AngularEntry],
                       graph: GeometryGraph,
                       tolerance: float = DEFAULT_TOLERANCE,
                       detect_mismatches: bool = True) -> NodeReport:
        """
        Join the edges of every pair of angularly adjacent paths at a node.

        Args:
            node: Node being processed
            entries: Spine ends at the node sorted by AngularSorter.sort_node
            graph: Arena owning the edge curves
            tolerance: Coincidence tolerance for edge ends
            detect_mismatches: Refuse mitres that trim one edge while extending
                the other beyond what the geometry allows (see Curve.match_ends)
        """
        report = NodeReport(node, list(entries))
        n = len(entries)
        if n < 2:
            return report

        # Each pair is met twice (as i's left pair and as i+1's right pair)
        joined = set()
        for i in range(n):
            current = entries[i]
            right = entries[i - 1]
            left = entries[(i + 1) % n]

            pairs = (
                (WPMath.normalize_angle(current.angle - right.angle),
                 edge_end_towards(current, EdgeSide.RIGHT), edge_end_towards(right, EdgeSide.LEFT)),
                (WPMath.normalize_angle(left.angle - current.angle),
                 edge_end_towards(current, EdgeSide.LEFT), edge_end_towards(left, EdgeSide.RIGHT)),
            )
            for gap, end0, end1 in pairs:
                key = frozenset((id(end0[0]), id(end1[0])))
                if key in joined:
                    continue
                joined.add(key)
                EdgeReconciler._join(node, graph, report, tolerance, detect_mismatches, gap, end0, end1)

        logger.debug("Node %d at %s: %d paths, %d coincident, %d mitred, %d extended, %d failed",
                     node.handle, node.position, n, report.coincident, report.mitred,
                     report.extended, report.failed)
        return report

    @staticmethod
    def _join(node, graph, report, tolerance, detect_mismatches, gap, end0, end1) -> None:
        v0, offset0 = end0
        v1, offset1 = end1
        if v0 is None or v1 is None:
            logger.debug("Node %d: edge not generated, pair skipped", node.handle)
            return
        if not (v0.position.is_valid() and v1.position.is_valid()):
            report.failed += 1
            return

        if v0.position.distance_to(v1.position) <= tolerance:
            report.coincident += 1
            return

        can_trim0 = can_trim1 = True
        if gap > math.pi:
            if offset0 > offset1:
                can_trim0 = False
            elif offset1 > offset0:
                can_trim1 = False

        if Curve.match_ends(graph, v0, v1, tolerance, detect_mismatches, can_trim0, can_trim1):
            report.mitred += 1
            return

        origin = node.position
        if v0.position.distance_to(origin) >= v1.position.distance_to(origin):
            far, near = v0, v1
        else:
            far, near = v1, v0

        if Curve.extend_to_line_xy(graph, far, origin, near.position - origin):
            report.extended += 1
        else:
            report.failed += 1
            logger.warning("Node %d at %s: edge end %s cannot be extended to meet %s; "
                           "edge left invalid", node.handle, origin, far, near.position)

    @staticmethod
    @profile("reconcile_edges")
    def reconcile_all(nodes: Sequence[Node],
                      path_map: Dict[int, Tuple[int, WidePath]],
                      graph: GeometryGraph,
                      tolerance: float = DEFAULT_TOLERANCE,
                      angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE,
                      detect_mismatches: bool = True) -> List[NodeReport]:
        """Sort and reconcile every node, in the given order."""
        reports = []
        for node in nodes:
            with perf_marker("sort_node"):
                entries = AngularSorter.sort_node(node, path_map, angle_tolerance)
            reports.append(EdgeReconciler.reconcile_node(node, entries, graph, tolerance, detect_mismatches))
        return reports
