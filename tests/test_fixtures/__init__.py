"""Test fixtures and utilities for widepath testing.

Organized into logical modules:
- network: NetworkBuilder for assembling graphs of wide paths
- assertions: Custom assertion functions (assert_points_close, assert_ends_meet, ...)
"""

from .network import NetworkBuilder
from .assertions import assert_points_close, assert_ends_meet, assert_parallel_offset

__all__ = [
    'NetworkBuilder',
    'assert_points_close',
    'assert_ends_meet',
    'assert_parallel_offset',
]
