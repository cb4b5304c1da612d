"""
WidePath - a linear entity with a spine curve and on-plan width.

A wide path is rendered as two boundary (edge) curves offset either side of
its spine. Edges are produced by the edge generator and later trimmed or
extended in place at shared nodes by the edge reconciler.

Parameter space for point queries:
    u: normalised position along the path (0 = start, 1 = end)
    v: normalised position across the path (0 = left edge, 1 = right edge)
"""

from __future__ import annotations
from typing import List, Optional, Sequence

import numpy as np

from widepath.mathutils.vec3 import Vec3
from widepath.elements.wp_curve import Curve


class WidePath:
    """
    A spine curve plus left/right offsets and the edge curves derived from them.

    Attributes:
        spine: Centreline curve (may be None; such paths are skipped)
        left_offset: Distance from spine to left edge (>= 0)
        right_offset: Distance from spine to right edge (>= 0)
        left_edge / right_edge: Edge curves, None until generated
        left_end_pinch / right_end_pinch: Distance by which the ends of that
            edge are pulled towards the spine to curve it (0 = straight offset)
        name: Optional label used in log messages
    """

    def __init__(self, spine: Optional[Curve], left_offset: float = 0.5, right_offset: float = 0.5,
                 left_end_pinch: float = 0.0, right_end_pinch: float = 0.0,
                 name: Optional[str] = None):
        if left_offset < 0 or right_offset < 0:
            raise ValueError(f"Path offsets must be non-negative, got left={left_offset}, right={right_offset}")
        if left_end_pinch < 0 or right_end_pinch < 0:
            raise ValueError(f"End pinch must be non-negative, got left={left_end_pinch}, right={right_end_pinch}")
        self.spine = spine
        self.left_offset = float(left_offset)
        self.right_offset = float(right_offset)
        self.left_end_pinch = float(left_end_pinch)
        self.right_end_pinch = float(right_end_pinch)
        self.name = name
        self.left_edge: Optional[Curve] = None
        self.right_edge: Optional[Curve] = None

    @classmethod
    def with_width(cls, spine: Optional[Curve], width: float, **kwargs) -> 'WidePath':
        """Path of the given total width centred on its spine."""
        return cls(spine, width / 2.0, width / 2.0, **kwargs)

    @property
    def width(self) -> float:
        return self.left_offset + self.right_offset

    def edges(self) -> List[Curve]:
        """Generated edge curves (left first), skipping any not yet generated."""
        return [e for e in (self.left_edge, self.right_edge) if e is not None]

    # ------------------------------------------------------------------
    # Point queries
    # ------------------------------------------------------------------

    def point_at(self, u: float, v: float) -> Vec3:
        """
        Point at (u, v) in path parameter space.

        Interpolates between the left and right edges when both exist, falls
        back to the spine, and returns Vec3.unset() for a path with no geometry.
        """
        if self.left_edge is not None and self.right_edge is not None:
            return self.left_edge.point_at(u).interpolate(self.right_edge.point_at(u), v)
        if self.spine is not None:
            return self.spine.point_at(u)
        return Vec3.unset()

    def points_at(self, u: float, vs: Sequence[float]) -> List[Vec3]:
        """Points across the path at a single u. Only the spine point if edges are missing."""
        if self.left_edge is not None and self.right_edge is not None:
            p_left = self.left_edge.point_at(u)
            p_right = self.right_edge.point_at(u)
            return [p_left.interpolate(p_right, v) for v in vs]
        if self.spine is not None:
            return [self.spine.point_at(u)]
        return []

    def points_grid(self, us: Sequence[float], vs: Sequence[float]) -> Optional[np.ndarray]:
        """
        Grid of points as a (len(us), len(vs), 3) array.

        Requires both edges; returns None otherwise.
        """
        if self.left_edge is None or self.right_edge is None:
            return None
        grid = np.empty((len(us), len(vs), 3), dtype=np.float64)
        for i, u in enumerate(us):
            for j, p in enumerate(self.points_at(u, vs)):
                grid[i, j] = p.to_tuple()
        return grid

    def boundary_points(self, resolution: int = 16) -> List[Vec3]:
        """
        Closed outline: along the left edge from start to end, then back along
        the right edge. The first point is not repeated at the end.
        """
        points: List[Vec3] = []
        if self.left_edge is not None:
            points.extend(self.left_edge.to_points(resolution))
        if self.right_edge is not None:
            for p in reversed(self.right_edge.to_points(resolution)):
                if points and points[-1].distance_to(p) < 1e-12:
                    continue
                points.append(p)
        if len(points) > 1 and points[0].distance_to(points[-1]) < 1e-12:
            points.pop()
        return points

    def __repr__(self):
        label = f"'{self.name}' " if self.name else ''
        return f"WidePath({label}{self.spine!r}, left={self.left_offset}, right={self.right_offset})"
