"""
Vertices and nodes.

A Vertex is a position owned by exactly one curve. It refers back to its
owning curve and (optionally) to a shared Node by integer handle only; the
objects themselves live in a GeometryGraph arena, so there are no reference
cycles between curves, vertices and nodes.
"""

from __future__ import annotations
from typing import List, Optional

from widepath.mathutils.vec3 import Vec3
from widepath.wp_types import OwnershipError


class Vertex:
    """
    A curve control point.

    Attributes:
        position: World position (mutable; reconciliation moves edge ends in place)
        owner: Handle of the owning curve, or None if not yet claimed
        node: Handle of the node this vertex is attached to, or None
        is_start: True if this is the first vertex of its curve
        is_end: True if this is the last vertex of its curve
    """
    __slots__ = ('position', 'owner', 'node', 'is_start', 'is_end')

    def __init__(self, position=(0.0, 0.0, 0.0)):
        self.position = Vec3(position)
        self.owner: Optional[int] = None
        self.node: Optional[int] = None
        self.is_start = False
        self.is_end = False

    def claim(self, owner: int, is_start: bool, is_end: bool) -> None:
        """Assign this vertex to the curve with the given handle."""
        if self.owner is not None and self.owner != owner:
            raise OwnershipError(
                f"Vertex at {self.position} is already owned by curve {self.owner}; "
                f"it cannot be added to curve {owner}")
        self.owner = owner
        self.is_start = is_start
        self.is_end = is_end

    def __repr__(self):
        end = 'start' if self.is_start else 'end' if self.is_end else 'interior'
        return f"Vertex({self.position}, owner={self.owner}, node={self.node}, {end})"


class Node:
    """
    A point in space shared by the spine vertices of one or more paths.

    Nodes are created upstream (GeometryGraph.add_node) and populated with
    GeometryGraph.attach; the edge solvers only read position and vertices.
    """
    __slots__ = ('handle', 'position', 'vertices')

    def __init__(self, handle: int, position):
        self.handle = handle
        self.position = Vec3(position)
        self.vertices: List[Vertex] = []

    def __repr__(self):
        return f"Node({self.handle}, {self.position}, {len(self.vertices)} vertices)"
