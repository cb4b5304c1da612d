"""
Solvers for wide path networks.

Pipeline:
1. EdgeGenerator - offsets every spine into untrimmed left/right edges
2. NodeExtractor - collects the nodes the spines meet at
3. AngularSorter - orders the spine ends at a node by outward angle
4. EdgeReconciler - joins the edges of angularly adjacent paths
"""

from .wp_edge_generator import (
    EdgeGenerator,
)

from .wp_node_extractor import (
    NodeExtractor,
)

from .wp_angular_sorter import (
    AngularSorter,
    AngularEntry,
)

from .wp_edge_reconciler import (
    EdgeReconciler,
    NodeReport,
    edge_end_towards,
)

__all__ = [
    'EdgeGenerator',
    'NodeExtractor',
    'AngularSorter',
    'AngularEntry',
    'EdgeReconciler',
    'NodeReport',
    'edge_end_towards',
]
