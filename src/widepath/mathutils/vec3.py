"""
Pure Python 3D vector math.

This module provides Vec3, a lightweight 3D vector class. For 3-element vectors,
pure Python is considerably faster than numpy arrays due to avoiding array
creation overhead, so numpy is only used for bulk exports (see Curve.to_array).

Vec3 supports arithmetic operators (+, -, *, /), indexing and iteration.
An "unset" vector (all components NaN) is used throughout the package as the
explicit invalid geometric value; test it with is_valid().
"""
import math


class Vec3:
    """
    A lightweight 3D vector class that supports arithmetic operators.

    Stores components directly as attributes for fast access.
    Supports indexing like a tuple/list for compatibility.
    """
    __slots__ = ('x', 'y', 'z')

    def __init__(self, x=0.0, y=0.0, z=0.0):
        # Fast path: check if x is a simple number
        try:
            self.x = float(x)
            self.y = float(y)
            self.z = float(z)
        except TypeError:
            # x is a sequence (tuple, list, array, Vec3); 2D input gets z=0
            self.x = float(x[0])
            self.y = float(x[1])
            self.z = float(x[2]) if len(x) > 2 else 0.0

    @classmethod
    def unset(cls):
        """The invalid vector (all components NaN)."""
        return cls(math.nan, math.nan, math.nan)

    def __getitem__(self, i):
        if i == 0: return self.x
        if i == 1: return self.y
        if i == 2: return self.z
        raise IndexError(f"Vec3 index {i} out of range")

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __len__(self):
        return 3

    def __repr__(self):
        return f"Vec3({self.x}, {self.y}, {self.z})"

    def __eq__(self, other):
        try:
            return self.x == other[0] and self.y == other[1] and self.z == other[2]
        except (TypeError, IndexError):
            return NotImplemented

    __hash__ = None

    def __add__(self, other):
        try:
            return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)
        except AttributeError:
            return Vec3(self.x + other[0], self.y + other[1], self.z + other[2])

    def __radd__(self, other):
        return Vec3(self.x + other[0], self.y + other[1], self.z + other[2])

    def __sub__(self, other):
        try:
            return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)
        except AttributeError:
            return Vec3(self.x - other[0], self.y - other[1], self.z - other[2])

    def __rsub__(self, other):
        return Vec3(other[0] - self.x, other[1] - self.y, other[2] - self.z)

    def __mul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __truediv__(self, scalar):
        inv = 1.0 / scalar
        return Vec3(self.x * inv, self.y * inv, self.z * inv)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other):
        """Dot product."""
        return self.x * other[0] + self.y * other[1] + self.z * other[2]

    def cross(self, other):
        """Cross product."""
        return Vec3(
            self.y * other[2] - self.z * other[1],
            self.z * other[0] - self.x * other[2],
            self.x * other[1] - self.y * other[0]
        )

    def length_sq(self):
        """Squared length (avoids sqrt)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self):
        """Vector length/magnitude."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self):
        """Return normalized copy."""
        mag = self.length()
        if mag < 1e-10:
            return Vec3(0.0, 0.0, 0.0)
        inv_mag = 1.0 / mag
        return Vec3(self.x * inv_mag, self.y * inv_mag, self.z * inv_mag)

    def distance_to(self, other):
        dx, dy, dz = self.x - other[0], self.y - other[1], self.z - other[2]
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def with_xy(self, x, y):
        """Copy with new X and Y, keeping Z."""
        return Vec3(x, y, self.z)

    def is_valid(self):
        """True if all components are finite numbers."""
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def interpolate(self, other, t):
        """Linear interpolation towards other."""
        return Vec3(
            self.x + t * (other[0] - self.x),
            self.y + t * (other[1] - self.y),
            self.z + t * (other[2] - self.z)
        )

    def to_tuple(self):
        """Convert to tuple."""
        return (self.x, self.y, self.z)

    def to_list(self):
        """Convert to list."""
        return [self.x, self.y, self.z]


# Standalone functions for tuple-based math (for places that don't use Vec3)

def vec3_distance(a, b):
    """Distance between two points."""
    dx, dy, dz = a[0] - b[0], a[1] - b[1], a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)

def vec3_distance_sq(a, b):
    """Squared distance."""
    dx, dy, dz = a[0] - b[0], a[1] - b[1], a[2] - b[2]
    return dx * dx + dy * dy + dz * dz

def vec3_lerp(a, b, t):
    """Linear interpolation."""
    return (
        a[0] + t * (b[0] - a[0]),
        a[1] + t * (b[1] - a[1]),
        a[2] + t * (b[2] - a[2])
    )
