"""
Plan (XY) geometry helpers used by the curve types and the edge solvers.

All functions accept any indexable 3D point/vector (tuple, list, Vec3) and work
in the XY plane; the Z coordinate of results is carried over from the first
input point. Functions that can have no solution return Vec3.unset() (or an
empty list) rather than raising, so callers can propagate the invalid value.
"""
import math

from .vec3 import Vec3

TWO_PI = 2.0 * math.pi

# Determinant below which two plan directions are considered parallel
PARALLEL_TOLERANCE = 1e-10


def normalize_angle(angle):
    """Wrap an angle in radians into [0, 2pi)."""
    angle = math.fmod(angle, TWO_PI)
    if angle < 0.0:
        angle += TWO_PI
    # fmod of a tiny negative number can round up to exactly 2pi
    if angle >= TWO_PI:
        angle = 0.0
    return angle


def angle_xy(direction, tol=1e-9):
    """
    Plan angle of a direction vector, measured anticlockwise from +X, in [0, 2pi).

    Components smaller than tol are snapped to zero first so floating point
    noise (e.g. -1e-17 instead of 0) cannot flip the angle across the 0/2pi seam.
    """
    dx = direction[0] if abs(direction[0]) > tol else 0.0
    dy = direction[1] if abs(direction[1]) > tol else 0.0
    return normalize_angle(math.atan2(dy, dx))


def right_normal_xy(direction):
    """Unit normal to the right of a direction of travel (clockwise perpendicular in plan)."""
    dx, dy = direction[0], direction[1]
    mag = math.hypot(dx, dy)
    if mag < 1e-12:
        return Vec3(0.0, 0.0, 0.0)
    return Vec3(dy / mag, -dx / mag, 0.0)


def cross_xy(a, b):
    """Z component of the cross product of two plan vectors."""
    return a[0] * b[1] - a[1] * b[0]


def line_line_xy(pt0, dir0, pt1, dir1, tol=PARALLEL_TOLERANCE):
    """
    Intersect two infinite lines in the XY plane.

    Args:
        pt0, dir0: Point on and direction of the first line
        pt1, dir1: Point on and direction of the second line
        tol: Determinant threshold for parallel detection

    Returns:
        (point, t0, t1) where point = pt0 + t0*dir0 = pt1 + t1*dir1 (in XY) and
        point.z is taken from pt0. Parallel lines give (Vec3.unset(), nan, nan).
    """
    denom = cross_xy(dir0, dir1)
    if abs(denom) < tol:
        return Vec3.unset(), math.nan, math.nan

    wx = pt1[0] - pt0[0]
    wy = pt1[1] - pt0[1]
    t0 = (wx * dir1[1] - wy * dir1[0]) / denom
    t1 = (wx * dir0[1] - wy * dir0[0]) / denom
    return Vec3(pt0[0] + t0 * dir0[0], pt0[1] + t0 * dir0[1], pt0[2]), t0, t1


def line_circle_xy(pt, direction, center, radius):
    """
    Intersect an infinite line with a circle in the XY plane.

    Returns:
        List of line parameters t (point = pt + t*direction), 0, 1 or 2 entries.
    """
    ax = pt[0] - center[0]
    ay = pt[1] - center[1]
    a = direction[0] * direction[0] + direction[1] * direction[1]
    if a < 1e-20:
        return []
    b = 2.0 * (ax * direction[0] + ay * direction[1])
    c = ax * ax + ay * ay - radius * radius
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return []
    if disc == 0.0:
        return [-b / (2.0 * a)]
    root = math.sqrt(disc)
    return [(-b - root) / (2.0 * a), (-b + root) / (2.0 * a)]


def circle_circle_xy(c0, r0, c1, r1):
    """Intersection points of two circles in the XY plane (0, 1 or 2 Vec3s, z from c0)."""
    dx = c1[0] - c0[0]
    dy = c1[1] - c0[1]
    d = math.hypot(dx, dy)
    if d < 1e-12 or d > r0 + r1 or d < abs(r0 - r1):
        return []
    a = (r0 * r0 - r1 * r1 + d * d) / (2.0 * d)
    h = math.sqrt(max(0.0, r0 * r0 - a * a))
    ux, uy = dx / d, dy / d
    mx, my = c0[0] + a * ux, c0[1] + a * uy
    if h == 0.0:
        return [Vec3(mx, my, c0[2])]
    return [Vec3(mx - h * uy, my + h * ux, c0[2]),
            Vec3(mx + h * uy, my - h * ux, c0[2])]


def circle_from_three_points(p0, p1, p2):
    """
    Circumcircle of three points in the XY plane.

    Returns:
        (center, radius) or None if the points are collinear.
    """
    ax, ay = p0[0], p0[1]
    bx, by = p1[0], p1[1]
    cx, cy = p2[0], p2[1]
    d = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    if abs(d) < 1e-12:
        return None
    a_sq = ax * ax + ay * ay
    b_sq = bx * bx + by * by
    c_sq = cx * cx + cy * cy
    ux = (a_sq * (by - cy) + b_sq * (cy - ay) + c_sq * (ay - by)) / d
    uy = (a_sq * (cx - bx) + b_sq * (ax - cx) + c_sq * (bx - ax)) / d
    center = Vec3(ux, uy, p0[2])
    return center, math.hypot(ax - ux, ay - uy)


def closest_point(points, target):
    """The entry of points nearest to target, or Vec3.unset() for an empty list."""
    best = None
    best_dist = math.inf
    for p in points:
        dx, dy, dz = p[0] - target[0], p[1] - target[1], p[2] - target[2]
        dist = dx * dx + dy * dy + dz * dz
        if dist < best_dist:
            best, best_dist = p, dist
    return Vec3(best) if best is not None else Vec3.unset()
