"""Geometry entities: vertices, nodes, curves, wide paths and the graph arena."""

from .wp_vertex import Vertex, Node
from .wp_graph import GeometryGraph
from .wp_curve import Curve, Line, PolyLine, Arc
from .wp_path import WidePath
