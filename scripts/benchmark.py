#!/usr/bin/env python
"""
Time the widepath pipeline on a generated grid network and display a
breakdown of the profiled stages.

Usage:
    python scripts/benchmark.py
    python scripts/benchmark.py --size 40 --iterations 5
    python scripts/benchmark.py --size 20 --jitter 0.3 --verbose

The network is a square grid of paths of alternating widths. --jitter moves
the interior grid points randomly (seeded) so junctions are not all square.
"""

import argparse
import logging
import random
import sys
import time
from pathlib import Path
from typing import Dict, List

# Add project paths for development
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from widepath import GeometryGraph, Line, WidePath, run, setup_logging


# ANSI colors for output
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
GRAY = "\033[90m"


def build_grid(size: int, spacing: float = 10.0, jitter: float = 0.0, seed: int = 0):
    """Build a size x size grid of nodes joined by wide line paths."""
    rng = random.Random(seed)
    graph = GeometryGraph()
    points = {}
    for i in range(size):
        for j in range(size):
            interior = 0 < i < size - 1 and 0 < j < size - 1
            dx = rng.uniform(-jitter, jitter) * spacing if interior else 0.0
            dy = rng.uniform(-jitter, jitter) * spacing if interior else 0.0
            points[i, j] = graph.add_node((i * spacing + dx, j * spacing + dy, 0.0))

    paths = []
    for (i, j), node in points.items():
        for di, dj in ((1, 0), (0, 1)):
            other = points.get((i + di, j + dj))
            if other is None:
                continue
            spine = graph.add_curve(Line(node.position, other.position))
            graph.attach(spine.start, node)
            graph.attach(spine.end, other)
            width = 2.0 if (i + j) % 2 else 3.0
            paths.append(WidePath.with_width(spine, width))
    return paths, graph


def print_timings(timings: Dict[str, Dict], iterations: int, total_ms: List[float]):
    print()
    print("=" * 70)
    print(f"{BOLD}TIMING RESULTS{RESET}")
    print("=" * 70)
    print()
    print(f"  Iterations:    {iterations}")
    print(f"  Total (best):  {min(total_ms):,.1f}ms")
    print(f"  Total (avg):   {sum(total_ms) / len(total_ms):,.1f}ms")
    print()
    print(f"  {'Stage':<24} {'Calls':>8} {'Total':>12} {'Avg':>12}  {'Parent'}")
    print(f"  {'─' * 24} {'─' * 8} {'─' * 12} {'─' * 12}  {'─' * 16}")

    grand_total = sum(s['total_ms'] for s in timings.values() if not s['parents']) or 1.0
    for name, stats in sorted(timings.items(), key=lambda kv: kv[1]['total_ms'], reverse=True):
        pct = stats['total_ms'] / grand_total * 100
        color = YELLOW if pct >= 25 else CYAN if pct >= 5 else GRAY
        parent = ", ".join(stats['parents']) or "-"
        print(f"  {color}{name:<24}{RESET} {stats['count']:>8} {stats['total_ms']:>10.2f}ms "
              f"{stats['avg_ms']:>10.3f}ms  {DIM}{parent}{RESET}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Benchmark the widepath pipeline on a grid network")
    parser.add_argument("--size", type=int, default=20, help="Grid points per side (default: 20)")
    parser.add_argument("--iterations", type=int, default=3, help="Number of timed runs (default: 3)")
    parser.add_argument("--jitter", type=float, default=0.0, help="Random displacement of interior points, as a fraction of the spacing")
    parser.add_argument("--seed", type=int, default=0, help="Seed for --jitter")
    parser.add_argument("--verbose", action="store_true", help="Log per-node reconciliation detail")
    args = parser.parse_args()

    if args.size < 2:
        parser.error("--size must be at least 2")

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    total_ms = []
    result = None
    for _ in range(args.iterations):
        paths, graph = build_grid(args.size, jitter=args.jitter, seed=args.seed)
        start = time.perf_counter()
        result = run(paths, graph, profile=True)
        total_ms.append((time.perf_counter() - start) * 1000)

    stats = result.stats
    print(f"{BOLD}Grid {args.size}x{args.size}{RESET}: {stats['path_count']} paths, "
          f"{stats['node_count']} nodes, {stats['junction_count']} junctions, "
          f"{stats['invalid_edge_count']} invalid edges")

    if not result.timings:
        print(f"{DIM}Profiling disabled (WIDEPATH_NO_PROFILING or python -O); stage timings unavailable{RESET}")
        return 0
    print_timings(result.timings, args.iterations, total_ms)
    return 0


if __name__ == "__main__":
    sys.exit(main())
