"""
Node extractor - collects the nodes referenced by a set of path spines.

Nodes are created and populated upstream; this only reads the node handle
stored on each spine end vertex.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Sequence

from widepath.profiling import profile

if TYPE_CHECKING:
    from widepath.elements.wp_graph import GeometryGraph
    from widepath.elements.wp_path import WidePath
    from widepath.elements.wp_vertex import Node


class NodeExtractor:

    @staticmethod
    @profile("extract_nodes")
    def extract_nodes(paths: Sequence[WidePath], graph: GeometryGraph) -> List[Node]:
        """
        Distinct nodes referenced by spine start/end vertices, in first-encountered order.

        Paths without a spine and spine ends not attached to a node contribute nothing.
        """
        seen = set()
        nodes: List[Node] = []
        for path in paths:
            if path.spine is None:
                continue
            for vertex in (path.spine.start, path.spine.end):
                if vertex.node is None or vertex.node in seen:
                    continue
                seen.add(vertex.node)
                nodes.append(graph.node(vertex.node))
        return nodes

    @staticmethod
    def path_counts(paths: Sequence[WidePath]) -> Dict[int, int]:
        """Number of spine ends attached to each node handle."""
        counts: Dict[int, int] = {}
        for path in paths:
            if path.spine is None:
                continue
            for vertex in (path.spine.start, path.spine.end):
                if vertex.node is not None:
                    counts[vertex.node] = counts.get(vertex.node, 0) + 1
        return counts

    @staticmethod
    def dead_end_count(paths: Sequence[WidePath]) -> int:
        """Number of nodes touched by exactly one spine end."""
        return sum(1 for count in NodeExtractor.path_counts(paths).values() if count == 1)
