"""
GeometryGraph - owning arena for curves and nodes.

Curves are stored by their integer handle and nodes by their index. Vertices
refer back to both using those handles, which keeps lookups O(1) in both
directions without the objects holding references to each other.

Usage:
    graph = GeometryGraph()
    spine = graph.add_curve(Line((0, 0, 0), (10, 0, 0)))
    node = graph.add_node((10, 0, 0))
    graph.attach(spine.end, node)
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Optional

from widepath.elements.wp_vertex import Node, Vertex
from widepath.wp_types import OwnershipError

if TYPE_CHECKING:
    from widepath.elements.wp_curve import Curve


class GeometryGraph:
    """Arena owning every curve and node taking part in a path network."""

    def __init__(self):
        self._curves: Dict[int, Curve] = {}
        self._nodes: List[Node] = []

    # ------------------------------------------------------------------
    # Curves
    # ------------------------------------------------------------------

    def add_curve(self, curve: Curve) -> Curve:
        """Register a curve and return it."""
        self._curves[curve.handle] = curve
        return curve

    def remove_curve(self, curve: Curve) -> None:
        """Unregister a curve, detaching its vertices from any nodes."""
        for v in curve.vertices:
            if v.node is not None:
                self.detach(v)
        self._curves.pop(curve.handle, None)

    def curve(self, handle: int) -> Curve:
        return self._curves[handle]

    def curve_of(self, vertex: Vertex) -> Optional[Curve]:
        """The registered curve owning a vertex, or None."""
        if vertex.owner is None:
            return None
        return self._curves.get(vertex.owner)

    @property
    def curves(self) -> List[Curve]:
        return list(self._curves.values())

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, position) -> Node:
        node = Node(len(self._nodes), position)
        self._nodes.append(node)
        return node

    def node(self, handle: int) -> Node:
        return self._nodes[handle]

    def node_of(self, vertex: Vertex) -> Optional[Node]:
        if vertex.node is None:
            return None
        return self._nodes[vertex.node]

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)

    def attach(self, vertex: Vertex, node: Node) -> None:
        """Attach a vertex to a node. A vertex may only sit on one node."""
        if vertex.node is not None:
            if vertex.node == node.handle:
                return
            raise OwnershipError(
                f"Vertex at {vertex.position} is already attached to node {vertex.node}; "
                f"it cannot be attached to node {node.handle}")
        vertex.node = node.handle
        node.vertices.append(vertex)

    def detach(self, vertex: Vertex) -> None:
        node = self.node_of(vertex)
        if node is not None:
            node.vertices.remove(vertex)
        vertex.node = None
