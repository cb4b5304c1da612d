"""
widepath engine - main entry point for generating the edges of a path network.

Usage:
    from widepath import run, WidePathConfig, GeometryGraph, WidePath, Line

    graph = GeometryGraph()
    a = WidePath.with_width(graph.add_curve(Line((0, 0, 0), (10, 0, 0))), 2.0)
    b = WidePath.with_width(graph.add_curve(Line((10, 0, 0), (10, 10, 0))), 2.0)
    node = graph.add_node((10, 0, 0))
    graph.attach(a.spine.end, node)
    graph.attach(b.spine.start, node)

    result = run([a, b], graph)
    a.left_edge, a.right_edge   # reconciled edges

    # With overrides
    result = run(paths, graph, tolerance=1e-4, profile=True)
    print(result.timings)
    # {'generate_edges': {'count': 1, 'total_ms': 0.2, ...}, ...}

Pipeline:
    1. Generate the untrimmed edges of EVERY path (plus end pinch arcs)
    2. Extract the nodes referenced by the spines
    3. For each node: sort spine ends by outward angle, reconcile edges

Edge generation must finish for the whole network before any node is
reconciled, since reconciliation reads neighbouring edges as plain offsets.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

import logging

from widepath.elements.solvers.wp_angular_sorter import AngularSorter
from widepath.elements.solvers.wp_edge_generator import EdgeGenerator
from widepath.elements.solvers.wp_edge_reconciler import EdgeReconciler, NodeReport
from widepath.elements.solvers.wp_node_extractor import NodeExtractor
from widepath.profiling import enable_profiling, get_profile_results, reset_profile
from widepath.wp_types import DEFAULT_ANGLE_TOLERANCE, DEFAULT_TOLERANCE

if TYPE_CHECKING:
    from widepath.elements.wp_graph import GeometryGraph
    from widepath.elements.wp_path import WidePath
    from widepath.elements.wp_vertex import Node

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class WidePathConfig:
    """
    Configuration options for the network edge pipeline.

    Attributes:
        tolerance: Distance below which two edge ends are considered to meet.

        angle_tolerance: Direction components below this are treated as zero
            when computing outward angles, so axis-aligned paths sort stably.

        detect_mismatches: Refuse mitres that would trim one edge while
            extending its neighbour past the geometry (falls back to extending
            the farther edge onto the corner line instead).

        apply_end_pinch: Replace edges of paths with a positive end pinch by
            arcs before reconciliation.

        profile: Record timings of the pipeline stages into result.timings.
    """
    tolerance: float = DEFAULT_TOLERANCE
    angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE
    detect_mismatches: bool = True
    apply_end_pinch: bool = True
    profile: bool = False


@dataclass
class NetworkResult:
    """
    Result from running the pipeline.

    Attributes:
        paths: The input paths, with left_edge/right_edge populated.
        nodes: Nodes processed, in extraction order.
        reports: Per-node reconciliation outcome (same order as nodes).
        timings: Profiled stage timings (if config.profile=True).
        stats: Counts describing the network and the result.
    """
    paths: List['WidePath']
    nodes: List['Node'] = field(default_factory=list)
    reports: List[NodeReport] = field(default_factory=list)
    timings: Optional[Dict[str, Any]] = None
    stats: Optional[Dict[str, int]] = None

    @property
    def invalid_edges(self) -> List[Any]:
        """Edge curves left invalid (e.g. by an extension with no solution)."""
        return [edge for path in self.paths for edge in path.edges() if not edge.is_valid()]

    @property
    def left_edges(self) -> List[Any]:
        """Left edge of every path that has one, in path order."""
        return [p.left_edge for p in self.paths if p.left_edge is not None]

    @property
    def right_edges(self) -> List[Any]:
        """Right edge of every path that has one, in path order."""
        return [p.right_edge for p in self.paths if p.right_edge is not None]

    def total_spine_length(self) -> float:
        """Summed spine length of all paths with a spine."""
        return sum(p.spine.length for p in self.paths if p.spine is not None)


# =============================================================================
# Internal Helpers
# =============================================================================

def _collect_stats(paths: Sequence[WidePath], nodes: Sequence[Node], reports: Sequence[NodeReport],
                   invalid_count: int) -> Dict[str, int]:
    return {
        'path_count': sum(1 for p in paths if p.spine is not None),
        'node_count': len(nodes),
        'junction_count': sum(1 for r in reports if r.reconciled),
        'dead_end_count': NodeExtractor.dead_end_count(paths),
        'invalid_edge_count': invalid_count,
        'missing_edge_count': sum(2 - len(p.edges()) for p in paths if p.spine is not None),
    }


# =============================================================================
# Main API
# =============================================================================

def run(
    paths: Sequence[WidePath],
    graph: GeometryGraph,
    config: Optional[WidePathConfig] = None,
    *,
    # Convenience kwargs that override config
    tolerance: Optional[float] = None,
    profile: Optional[bool] = None,
) -> NetworkResult:
    """
    Generate and reconcile the edges of a network of wide paths.

    Args:
        paths: Paths to process. Their order breaks ties between paths leaving
            a node at the same angle.
        graph: Arena owning the spines, nodes and (after this call) the edges.
            Spine ends must already be attached to their nodes.
        config: Pipeline options (WidePathConfig instance).
        tolerance: Override config.tolerance.
        profile: Override config.profile.

    Returns:
        NetworkResult. Edges are set on the paths in place.
    """
    if config is None:
        config = WidePathConfig()

    if tolerance is not None:
        config.tolerance = tolerance
    if profile is not None:
        config.profile = profile

    if config.profile:
        reset_profile()
        enable_profiling(True)

    try:
        paths = list(paths)

        # Phase 1: every edge, before any reconciliation
        EdgeGenerator.generate_all(paths, graph, config.apply_end_pinch)

        # Phase 2: trim/extend at the nodes
        nodes = NodeExtractor.extract_nodes(paths, graph)
        path_map = AngularSorter.build_path_map(paths)
        reports = EdgeReconciler.reconcile_all(nodes, path_map, graph,
                                               config.tolerance, config.angle_tolerance,
                                               config.detect_mismatches)

        result = NetworkResult(paths=paths, nodes=nodes, reports=reports)
        invalid = result.invalid_edges
        if invalid:
            logger.warning("%d edge curve(s) left invalid after reconciliation", len(invalid))

        result.stats = _collect_stats(paths, nodes, reports, len(invalid))
        result.timings = get_profile_results() if config.profile else None
        logger.info("Processed %d paths at %d nodes (%d junctions)",
                    result.stats['path_count'], result.stats['node_count'], result.stats['junction_count'])
        return result

    finally:
        if config.profile:
            enable_profiling(False)
