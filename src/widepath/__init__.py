"""widepath - edge generation and junction reconciliation for networks of wide paths."""

__version__ = "0.1.0"

from widepath.wp_engine import run, WidePathConfig, NetworkResult
from widepath.wp_types import PathEnd, EdgeSide, OwnershipError, DEFAULT_TOLERANCE
from widepath.mathutils.vec3 import Vec3
from widepath.elements import Vertex, Node, GeometryGraph, Curve, Line, PolyLine, Arc, WidePath
from widepath.logging_config import setup_logging

__all__ = [
    'run',
    'WidePathConfig',
    'NetworkResult',
    'PathEnd',
    'EdgeSide',
    'OwnershipError',
    'DEFAULT_TOLERANCE',
    'Vec3',
    'Vertex',
    'Node',
    'GeometryGraph',
    'Curve',
    'Line',
    'PolyLine',
    'Arc',
    'WidePath',
    'setup_logging',
]
