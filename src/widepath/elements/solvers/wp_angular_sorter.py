"""
Angular sorter - orders the paths meeting at a node by outward direction.

For each spine vertex on the node, the outward direction is the direction of
travel heading away from the node:

    start vertex -> tangent at t=0
    end vertex   -> reversed tangent at t=1

Entries are sorted anticlockwise by the plan angle of that direction in
[0, 2pi). Paths leaving at exactly the same angle are ordered by their index
in the input path list, then start vertex before end vertex (a path looping
back to the same node), so the order is always total and deterministic.

Main API:
    entries = AngularSorter.sort_node(node, path_map)
    entries[i].angle, entries[i].vertex, entries[i].path
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from dataclasses import dataclass

import widepath.mathutils.wp_math as WPMath
from widepath.elements.wp_vertex import Node, Vertex
from widepath.wp_types import DEFAULT_ANGLE_TOLERANCE, PathEnd

if TYPE_CHECKING:
    from widepath.elements.wp_path import WidePath


@dataclass(frozen=True)
class AngularEntry:
    """
    One spine end at a node.

    Attributes:
        angle: Outward direction angle in [0, 2pi)
        order: Index of the owning path in the input list (tie-break key)
        vertex: The spine end vertex on the node
        path: The path owning the spine
    """
    angle: float
    order: int
    vertex: Vertex
    path: 'WidePath'

    @property
    def end(self) -> PathEnd:
        return PathEnd.of_vertex(self.vertex)

    @property
    def sort_key(self) -> Tuple[float, int, int]:
        return (self.angle, self.order, self.end.value)


class AngularSorter:

    @staticmethod
    def build_path_map(paths: Sequence[WidePath]) -> Dict[int, Tuple[int, WidePath]]:
        """Map spine handle -> (input index, path) for every path with a spine."""
        return {path.spine.handle: (i, path) for i, path in enumerate(paths) if path.spine is not None}

    @staticmethod
    def outward_angle(path: WidePath, vertex: Vertex, tol: float = DEFAULT_ANGLE_TOLERANCE) -> float:
        """Plan angle of the spine direction heading away from the node at vertex."""
        if vertex.is_start:
            direction = path.spine.tangent_at(0.0)
        else:
            direction = -path.spine.tangent_at(1.0)
        return WPMath.angle_xy(direction, tol)

    @staticmethod
    def sort_node(node: Node, path_map: Dict[int, Tuple[int, WidePath]],
                  tol: float = DEFAULT_ANGLE_TOLERANCE) -> List[AngularEntry]:
        """
        Sorted entries for every vertex on the node owned by a spine in path_map.

        Vertices owned by any other curve are ignored.
        """
        entries = []
        for vertex in node.vertices:
            found = path_map.get(vertex.owner)
            if found is None:
                continue
            order, path = found
            if not (vertex.is_start or vertex.is_end):
                continue
            angle = AngularSorter.outward_angle(path, vertex, tol)
            entries.append(AngularEntry(angle, order, vertex, path))

        entries.sort(key=lambda e: e.sort_key)
        return entries
