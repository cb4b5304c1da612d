"""Shared enums, constants and exceptions for the widepath package."""

from enum import Enum


# ============================================================================
# CONSTANTS
# ============================================================================

# Default distance below which two positions are considered coincident
DEFAULT_TOLERANCE = 1e-6

# Direction components below this are snapped to zero before taking angles
DEFAULT_ANGLE_TOLERANCE = 1e-9


# ============================================================================
# ENUMS
# ============================================================================

class PathEnd(Enum):
    """Which end of a spine (or edge) curve we're referring to"""
    START = 0  # parameter t=0
    END = 1    # parameter t=1

    @classmethod
    def of_vertex(cls, vertex) -> 'PathEnd':
        return cls.START if vertex.is_start else cls.END


class EdgeSide(Enum):
    """Which boundary of a wide path, relative to the spine's direction of travel"""
    LEFT = -1
    RIGHT = 1


# ============================================================================
# EXCEPTIONS
# ============================================================================

class OwnershipError(RuntimeError):
    """
    Raised when a vertex is assigned to a second curve, or attached to a
    second node. This is a programmer error: the operation is aborted rather
    than leaving the graph in a corrupt state.
    """
