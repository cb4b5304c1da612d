"""
Curve types for wide path spines and edges.

All curves share one capability set (the Curve base class): length, point and
tangent evaluation, parallel offsetting, reversal and moving an end vertex onto
a line in plan. Concrete kinds:

    Line      - straight segment between two vertices
    PolyLine  - chain of straight segments (offset with mitred interior corners)
    Arc       - circular arc in plan; end vertices slide along the circle

Conventions:
    - Parameters t run 0 (start) to 1 (end).
    - offset(+d) moves the curve d to the RIGHT of its direction of travel in
      plan (the clockwise perpendicular, viewed from +Z). offset(-d) is left.
    - Each vertex is owned by exactly one curve. Building a curve from a vertex
      that already belongs to another curve raises OwnershipError.

End matching:
    Curve.match_ends(graph, v0, v1, ...) and Curve.extend_to_line_xy(graph, v, ...)
    resolve the curve owning each vertex through the GeometryGraph arena.
    Operations that have no geometric solution (e.g. extending a curve onto a
    parallel line) set the vertex position to Vec3.unset() and return False;
    they never raise. Check the result with Curve.is_valid().
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

import itertools
import math

import numpy as np

import widepath.mathutils.wp_math as WPMath
from widepath.mathutils.vec3 import Vec3
from widepath.elements.wp_vertex import Vertex
from widepath.wp_types import DEFAULT_TOLERANCE

if TYPE_CHECKING:
    from widepath.elements.wp_graph import GeometryGraph


# Stable, process-wide unique curve handles
_HANDLES = itertools.count()


def _as_vertex(point) -> Vertex:
    return point if isinstance(point, Vertex) else Vertex(point)


class Curve(ABC):
    """
    Base class for all curve kinds.

    Attributes:
        handle: Unique integer identifying this curve in a GeometryGraph
    """

    def __init__(self, vertices: Sequence):
        if len(vertices) < 2:
            raise ValueError(f"{type(self).__name__} needs at least 2 vertices, got {len(vertices)}")
        self.handle = next(_HANDLES)
        self._vertices: List[Vertex] = [_as_vertex(v) for v in vertices]
        last = len(self._vertices) - 1
        for i, v in enumerate(self._vertices):
            v.claim(self.handle, i == 0, i == last)

    # ------------------------------------------------------------------
    # Vertex access
    # ------------------------------------------------------------------

    @property
    def vertices(self) -> Tuple[Vertex, ...]:
        return tuple(self._vertices)

    @property
    def start(self) -> Vertex:
        return self._vertices[0]

    @property
    def end(self) -> Vertex:
        return self._vertices[-1]

    @property
    def start_point(self) -> Vec3:
        return self._vertices[0].position

    @property
    def end_point(self) -> Vec3:
        return self._vertices[-1].position

    def other_end(self, vertex: Vertex) -> Vertex:
        """The end vertex opposite to the given end vertex."""
        if vertex is self.start:
            return self.end
        if vertex is self.end:
            return self.start
        raise ValueError(f"{vertex!r} is not an end of curve {self.handle}")

    def is_valid(self) -> bool:
        """False if any vertex position is invalid (NaN) or the curve has no length."""
        if not all(v.position.is_valid() for v in self._vertices):
            return False
        return self.length > 0.0

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def length(self) -> float:
        ...

    @abstractmethod
    def point_at(self, t: float) -> Vec3:
        """Point at normalised parameter t (0 = start, 1 = end)."""

    @abstractmethod
    def tangent_at(self, t: float) -> Vec3:
        """Unit direction of travel at normalised parameter t."""

    @abstractmethod
    def offset(self, distance: float) -> 'Curve':
        """New curve offset in plan; positive distance is to the right of travel."""

    @abstractmethod
    def reversed(self) -> 'Curve':
        """New curve with the opposite direction of travel."""

    def tangent_at_vertex(self, vertex: Vertex) -> Vec3:
        """Direction of travel at one of this curve's end vertices."""
        if vertex is self.start:
            return self.tangent_at(0.0)
        if vertex is self.end:
            return self.tangent_at(1.0)
        raise ValueError(f"{vertex!r} is not an end of curve {self.handle}")

    def end_circle(self, vertex: Vertex) -> Optional[Tuple[Vec3, float]]:
        """(center, radius) of the curve at an end if it is circular there, else None."""
        return None

    def extend_end_to_line_xy(self, vertex: Vertex, line_point, line_direction) -> bool:
        """
        Move an end vertex so that it lies on an infinite line in plan.

        Straight-ended curves move the vertex along their end tangent. The Z
        coordinate of the vertex is kept.

        Returns:
            True on success. If the line is parallel to the end tangent the
            vertex position is set to Vec3.unset() and False is returned.
        """
        tangent = self.tangent_at_vertex(vertex)
        point, _, _ = WPMath.line_line_xy(vertex.position, tangent, line_point, line_direction)
        if not point.is_valid():
            vertex.position = Vec3.unset()
            return False
        vertex.position = vertex.position.with_xy(point.x, point.y)
        return True

    def to_points(self, resolution: int = 16) -> List[Vec3]:
        """Polyline approximation of this curve (control points for straight kinds)."""
        return [Vec3(v.position) for v in self._vertices]

    def to_array(self, resolution: int = 16) -> np.ndarray:
        """Points as an (n, 3) float array."""
        return np.array([p.to_tuple() for p in self.to_points(resolution)], dtype=np.float64)

    def __repr__(self):
        return f"{type(self).__name__}({self.start_point} -> {self.end_point})"

    # ------------------------------------------------------------------
    # End matching between two curves
    # ------------------------------------------------------------------

    @staticmethod
    def extend_to_line_xy(graph: GeometryGraph, vertex: Vertex, line_point, line_direction) -> bool:
        """Move the end vertex of its owning curve onto a line in plan (see extend_end_to_line_xy)."""
        curve = graph.curve_of(vertex)
        if curve is None:
            return False
        return curve.extend_end_to_line_xy(vertex, line_point, line_direction)

    @staticmethod
    def match_ends(graph: GeometryGraph,
                   end0: Vertex,
                   end1: Vertex,
                   tolerance: float = DEFAULT_TOLERANCE,
                   detect_mismatches: bool = False,
                   can_trim0: bool = True,
                   can_trim1: bool = True) -> bool:
        """
        Make two curve end vertices coincide, if possible.

        If the vertices already coincide within tolerance this is a pure check
        and nothing moves. Otherwise both ends are extended or trimmed to the
        intersection of the two curves' continuations in plan (a mitre).

        Args:
            graph: Arena used to find the curves owning end0 and end1
            end0, end1: End vertices of two different curves
            tolerance: Coincidence tolerance
            detect_mismatches: If True, a match that extends one curve while
                trimming the other is only accepted if neither trim is
                forbidden (can_trim0/can_trim1) and neither end moves further
                than the length of its curve.

        Returns:
            True if the ends coincide afterwards.
        """
        if end0.position.distance_to(end1.position) <= tolerance:
            return True

        crv0 = graph.curve_of(end0)
        crv1 = graph.curve_of(end1)
        if crv0 is None or crv1 is None:
            return False

        circle0 = crv0.end_circle(end0)
        circle1 = crv1.end_circle(end1)
        if circle0 is not None and circle1 is not None:
            return _match_circle_circle(end0, circle0, end1, circle1)
        if circle0 is not None:
            return _match_line_circle(end1, crv1.tangent_at_vertex(end1), end0, circle0)
        if circle1 is not None:
            return _match_line_circle(end0, crv0.tangent_at_vertex(end0), end1, circle1)

        tan0 = crv0.tangent_at_vertex(end0)
        tan1 = crv1.tangent_at_vertex(end1)
        point, t0, t1 = WPMath.line_line_xy(end0.position, tan0, end1.position, tan1)
        if not point.is_valid():
            return False

        if detect_mismatches:
            ext0 = _is_extension(t0, end0)
            ext1 = _is_extension(t1, end1)
            if ext0 != ext1:
                if (not can_trim0 and not ext0) or (not can_trim1 and not ext1):
                    return False
                if (_moves_past_other_end(crv0, end0, point) or
                        _moves_past_other_end(crv1, end1, point)):
                    return False

        end0.position = end0.position.with_xy(point.x, point.y)
        end1.position = end1.position.with_xy(point.x, point.y)
        return True


def _is_extension(delta_t: float, vertex: Vertex) -> bool:
    """Is moving an end vertex by delta_t along its tangent an extension (not a trim)?"""
    return (vertex.is_end and delta_t > 0) or (vertex.is_start and delta_t < 0)


def _moves_past_other_end(curve: Curve, vertex: Vertex, target) -> bool:
    other = curve.other_end(vertex).position
    return other.distance_to(vertex.position) < Vec3(target).distance_to(vertex.position)


def _match_line_circle(line_end: Vertex, tangent, arc_end: Vertex, circle) -> bool:
    center, radius = circle
    params = WPMath.line_circle_xy(line_end.position, tangent, center, radius)
    candidates = [line_end.position + tangent * t for t in params]
    point = WPMath.closest_point(candidates, arc_end.position)
    if not point.is_valid():
        return False
    arc_end.position = arc_end.position.with_xy(point.x, point.y)
    line_end.position = line_end.position.with_xy(point.x, point.y)
    return True


def _match_circle_circle(end0: Vertex, circle0, end1: Vertex, circle1) -> bool:
    points = WPMath.circle_circle_xy(circle0[0], circle0[1], circle1[0], circle1[1])
    midpoint = end0.position.interpolate(end1.position, 0.5)
    point = WPMath.closest_point(points, midpoint)
    if not point.is_valid():
        return False
    end0.position = end0.position.with_xy(point.x, point.y)
    end1.position = end1.position.with_xy(point.x, point.y)
    return True


# ============================================================================
# LINE
# ============================================================================

class Line(Curve):
    """
    A straight segment.

    The direction of travel is fixed at construction. Trimming or extending
    slides the end vertices along the line, so a line trimmed past its other
    end keeps its original tangent (and reports its length as the distance
    between its ends).
    """

    def __init__(self, start, end):
        super().__init__([start, end])
        if self.start_point.distance_to(self.end_point) < 1e-12:
            raise ValueError(f"Line has zero length at {self.start_point}")
        self.direction = (self.end_point - self.start_point).normalized()

    @property
    def length(self) -> float:
        return self.start_point.distance_to(self.end_point)

    def point_at(self, t: float) -> Vec3:
        return self.start_point.interpolate(self.end_point, t)

    def tangent_at(self, t: float) -> Vec3:
        return Vec3(self.direction)

    def offset(self, distance: float) -> 'Line':
        shift = WPMath.right_normal_xy(self.direction) * distance
        return Line(self.start_point + shift, self.end_point + shift)

    def reversed(self) -> 'Line':
        return Line(self.end_point, self.start_point)


# ============================================================================
# POLYLINE
# ============================================================================

class PolyLine(Curve):
    """
    A chain of straight segments.

    Parameters are distributed by length, so point_at(0.5) is half way along
    the chain rather than at the middle control point.
    """

    def __init__(self, points: Sequence):
        super().__init__(points)
        if self.length < 1e-12:
            raise ValueError("PolyLine has zero length")

    def _segment_lengths(self) -> List[float]:
        pts = [v.position for v in self._vertices]
        return [pts[i].distance_to(pts[i + 1]) for i in range(len(pts) - 1)]

    @property
    def length(self) -> float:
        return sum(self._segment_lengths())

    def _locate(self, t: float) -> Tuple[int, float]:
        """Segment index and local parameter for global parameter t."""
        lengths = self._segment_lengths()
        target = t * sum(lengths)
        for i, seg_length in enumerate(lengths):
            if target <= seg_length or i == len(lengths) - 1:
                local = target / seg_length if seg_length > 0 else 0.0
                return i, local
            target -= seg_length
        return len(lengths) - 1, 1.0

    def point_at(self, t: float) -> Vec3:
        i, local = self._locate(t)
        return self._vertices[i].position.interpolate(self._vertices[i + 1].position, local)

    def tangent_at(self, t: float) -> Vec3:
        if t <= 0.0:
            i = 0
        elif t >= 1.0:
            i = len(self._vertices) - 2
        else:
            i, _ = self._locate(t)
        return (self._vertices[i + 1].position - self._vertices[i].position).normalized()

    def offset(self, distance: float) -> 'PolyLine':
        pts = [v.position for v in self._vertices]
        shifted = []
        for i in range(len(pts) - 1):
            shift = WPMath.right_normal_xy(pts[i + 1] - pts[i]) * distance
            shifted.append((pts[i] + shift, pts[i + 1] - pts[i]))

        result = [shifted[0][0]]
        for i in range(1, len(shifted)):
            prev_point, prev_dir = shifted[i - 1]
            point, direction = shifted[i]
            corner, _, _ = WPMath.line_line_xy(prev_point, prev_dir, point, direction)
            # Collinear segments: the offset point itself is the corner
            result.append(corner if corner.is_valid() else point)
        last_point, last_dir = shifted[-1]
        result.append(last_point + last_dir)
        return PolyLine(result)

    def reversed(self) -> 'PolyLine':
        return PolyLine([Vec3(v.position) for v in reversed(self._vertices)])


# ============================================================================
# ARC
# ============================================================================

class Arc(Curve):
    """
    A circular arc in plan.

    The arc is stored as its center, radius and sense of rotation; the start
    and end angles are read from the end vertex positions, so an end vertex
    moved along the circle (see extend_end_to_line_xy) changes the sweep but not
    the shape.
    """

    def __init__(self, start, end, center, clockwise: bool = False):
        super().__init__([start, end])
        self.center = Vec3(center)
        self.radius = math.hypot(self.start_point.x - self.center.x, self.start_point.y - self.center.y)
        self.clockwise = clockwise
        if self.radius < 1e-12:
            raise ValueError("Arc has zero radius")

    @classmethod
    def through_points(cls, start, through, end) -> 'Arc':
        """Arc from start to end passing through a third point."""
        circle = WPMath.circle_from_three_points(start, through, end)
        if circle is None:
            raise ValueError(f"Cannot fit an arc through collinear points {start}, {through}, {end}")
        center, _ = circle
        clockwise = WPMath.cross_xy(Vec3(through) - Vec3(start), Vec3(end) - Vec3(through)) < 0
        return cls(start, end, center, clockwise)

    def _angles(self) -> Tuple[float, float]:
        """Start angle and signed sweep (negative when clockwise)."""
        s, e, c = self.start_point, self.end_point, self.center
        a_start = math.atan2(s.y - c.y, s.x - c.x)
        a_end = math.atan2(e.y - c.y, e.x - c.x)
        if self.clockwise:
            return a_start, -WPMath.normalize_angle(a_start - a_end)
        return a_start, WPMath.normalize_angle(a_end - a_start)

    @property
    def sweep(self) -> float:
        return self._angles()[1]

    @property
    def length(self) -> float:
        return self.radius * abs(self.sweep)

    def point_at(self, t: float) -> Vec3:
        a_start, sweep = self._angles()
        a = a_start + t * sweep
        z = self.start_point.z + t * (self.end_point.z - self.start_point.z)
        return Vec3(self.center.x + self.radius * math.cos(a),
                    self.center.y + self.radius * math.sin(a), z)

    def tangent_at(self, t: float) -> Vec3:
        a_start, sweep = self._angles()
        a = a_start + t * sweep
        if self.clockwise:
            return Vec3(math.sin(a), -math.cos(a), 0.0)
        return Vec3(-math.sin(a), math.cos(a), 0.0)

    def offset(self, distance: float) -> 'Arc':
        # Right of travel points away from the center on an anticlockwise arc
        new_radius = self.radius - distance if self.clockwise else self.radius + distance
        if new_radius <= 0.0:
            raise ValueError(f"Offset of {distance} collapses arc of radius {self.radius}")
        scale = new_radius / self.radius
        c = self.center

        def scaled(p):
            return p.with_xy(c.x + (p.x - c.x) * scale, c.y + (p.y - c.y) * scale)

        return Arc(scaled(self.start_point), scaled(self.end_point), c, self.clockwise)

    def reversed(self) -> 'Arc':
        return Arc(Vec3(self.end_point), Vec3(self.start_point), self.center, not self.clockwise)

    def end_circle(self, vertex: Vertex) -> Optional[Tuple[Vec3, float]]:
        return self.center, self.radius

    def extend_end_to_line_xy(self, vertex: Vertex, line_point, line_direction) -> bool:
        """Slide an end vertex along the circle to the nearest crossing with the line."""
        if vertex is not self.start and vertex is not self.end:
            raise ValueError(f"{vertex!r} is not an end of curve {self.handle}")
        params = WPMath.line_circle_xy(line_point, line_direction, self.center, self.radius)
        direction = Vec3(line_direction)
        candidates = [Vec3(line_point) + direction * t for t in params]
        point = WPMath.closest_point(candidates, vertex.position)
        if not point.is_valid():
            vertex.position = Vec3.unset()
            return False
        vertex.position = vertex.position.with_xy(point.x, point.y)
        return True

    def to_points(self, resolution: int = 16) -> List[Vec3]:
        return [self.point_at(i / resolution) for i in range(resolution + 1)]

    def __repr__(self):
        return (f"Arc({self.start_point} -> {self.end_point}, center={self.center}, "
                f"r={self.radius:.6g}, {'cw' if self.clockwise else 'ccw'})")
