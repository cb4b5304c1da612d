"""
Unit tests for EdgeReconciler: edge end selection and joining the edges of
adjacent paths at a single node.
"""

import math
import unittest

from widepath import EdgeSide, Line
from widepath.elements.solvers import AngularSorter, EdgeGenerator, EdgeReconciler, edge_end_towards
from tests.test_fixtures import NetworkBuilder, assert_ends_meet, assert_points_close


def reconcile_at(net, point, **kwargs):
    """Generate all edges, then reconcile the single node at point."""
    EdgeGenerator.generate_all(net.paths, net.graph)
    node = net.node_at(point)
    entries = AngularSorter.sort_node(node, AngularSorter.build_path_map(net.paths))
    return EdgeReconciler.reconcile_node(node, entries, net.graph, **kwargs)


class EdgeEndSelectionTests(unittest.TestCase):
    """Tests for which edge end faces which neighbour"""

    def setUp(self):
        self.net = NetworkBuilder()
        self.a = self.net.add_line_path([0, 0, 0], [10, 0, 0], left=1, right=2)
        self.b = self.net.add_line_path([10, 0, 0], [10, 10, 0], left=1, right=2)
        EdgeGenerator.generate_all(self.net.paths, self.net.graph)
        entries = AngularSorter.sort_node(self.net.node_at([10, 0, 0]),
                                          AngularSorter.build_path_map(self.net.paths))
        self.by_path = {e.path: e for e in entries}

    def testAtSpineStart(self):
        """Test a path leaving the node uses right edge to the right, left edge to the left"""
        entry = self.by_path[self.b]
        vertex, offset = edge_end_towards(entry, EdgeSide.RIGHT)
        self.assertIs(vertex, self.b.right_edge.start)
        self.assertEqual(offset, 2.0)
        vertex, offset = edge_end_towards(entry, EdgeSide.LEFT)
        self.assertIs(vertex, self.b.left_edge.start)
        self.assertEqual(offset, 1.0)

    def testAtSpineEnd(self):
        """Test a path arriving at the node swaps sides"""
        entry = self.by_path[self.a]
        vertex, offset = edge_end_towards(entry, EdgeSide.RIGHT)
        self.assertIs(vertex, self.a.left_edge.end)
        self.assertEqual(offset, 1.0)
        vertex, offset = edge_end_towards(entry, EdgeSide.LEFT)
        self.assertIs(vertex, self.a.right_edge.end)
        self.assertEqual(offset, 2.0)


class EdgeReconcilerTests(unittest.TestCase):
    """Tests for EdgeReconciler.reconcile_node"""

    def testSinglePathNotReconciled(self):
        """Test a node with one path is left as generated"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        report = reconcile_at(net, [10, 0, 0])
        self.assertFalse(report.reconciled)
        assert_points_close(self, [a.left_edge.end_point, a.right_edge.end_point], [[10, 1, 0], [10, -1, 0]])

    def testStraightContinuation(self):
        """Test collinear paths already meet, so nothing moves"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        b = net.add_line_path([10, 0, 0], [20, 0, 0], width=2)
        report = reconcile_at(net, [10, 0, 0])

        self.assertEqual(report.coincident, 2)
        self.assertEqual(report.mitred + report.extended + report.failed, 0)
        assert_ends_meet(self, a.left_edge.end, b.left_edge.start)
        assert_ends_meet(self, a.right_edge.end, b.right_edge.start)
        assert_points_close(self, a.left_edge.end_point, [10, 1, 0])

    def testRightAngleTurn(self):
        """Test an L junction: inner edges trimmed, outer edges extended to the corner"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        b = net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        report = reconcile_at(net, [10, 0, 0])

        self.assertEqual(report.mitred, 2)
        self.assertEqual(report.coincident, 0)
        self.assertEqual(report.failed, 0)

        # Turning left: the inner corner is on the left
        assert_points_close(self, a.left_edge.end_point, [9, 1, 0])
        assert_ends_meet(self, a.left_edge.end, b.left_edge.start)
        assert_points_close(self, a.right_edge.end_point, [11, -1, 0])
        assert_ends_meet(self, a.right_edge.end, b.right_edge.start)

        self.assertAlmostEqual(a.left_edge.length, 9.0)
        self.assertAlmostEqual(b.left_edge.length, 9.0)
        self.assertAlmostEqual(a.right_edge.length, 11.0)
        self.assertAlmostEqual(b.right_edge.length, 11.0)

        # Far ends untouched
        assert_points_close(self, a.left_edge.start_point, [0, 1, 0])
        assert_points_close(self, b.right_edge.end_point, [11, 10, 0])

    def testThreeWayJunction(self):
        """Test a Y junction: each edge meets exactly one neighbouring edge"""
        net = NetworkBuilder()
        paths = []
        for degrees in (90, 210, 330):
            a = math.radians(degrees)
            paths.append(net.add_line_path([0, 0, 0], [10 * math.cos(a), 10 * math.sin(a), 0], width=2))
        report = reconcile_at(net, [0, 0, 0])
        self.assertEqual(report.failed, 0)

        corners = []
        for i, path in enumerate(paths):
            right_neighbour = paths[(i - 1) % 3]
            assert_ends_meet(self, path.right_edge.start, right_neighbour.left_edge.start)
            corners.append(path.right_edge.start_point)

        mitre = 1.0 / math.sin(math.radians(60))
        for corner in corners:
            self.assertAlmostEqual(math.hypot(corner.x, corner.y), mitre, places=6)
        for i in range(3):
            self.assertGreater(corners[i].distance_to(corners[(i + 1) % 3]), 1.0,
                               "Unrelated edges must not be merged")

    def testVariableWidthLeavesStep(self):
        """Test collinear paths of different widths keep a step on the node line"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [5, 0, 0], width=4)
        b = net.add_line_path([5, 0, 0], [10, 0, 0], width=6)
        report = reconcile_at(net, [5, 0, 0])

        self.assertEqual(report.failed, 0)
        self.assertGreater(report.extended, 0)
        assert_points_close(self, [a.right_edge.end_point, b.right_edge.start_point], [[5, -2, 0], [5, -3, 0]])
        assert_points_close(self, [a.left_edge.end_point, b.left_edge.start_point], [[5, 2, 0], [5, 3, 0]])

    def testWiderPathNotTrimmedAcrossReflexGap(self):
        """Test the wider path keeps its edge when a narrow path branches off at an angle"""
        net = NetworkBuilder()
        wide = net.add_line_path([0, 0, 0], [10, 0, 0], width=6)
        narrow = net.add_line_path([10, 0, 0], [20, 5, 0], width=1)
        report = reconcile_at(net, [10, 0, 0])
        self.assertEqual(report.failed, 0)

        for edge in wide.edges() + narrow.edges():
            self.assertTrue(edge.is_valid(), f"{edge} should stay valid")
        self.assertGreaterEqual(wide.right_edge.length, 10.0 - 1e-9,
                                "Outer edge of the wide path must not be cut back")

    def testUnsolvableExtensionInvalid(self):
        """Test an extension with no solution leaves an invalid edge and does not raise"""
        net = NetworkBuilder()
        # a's left edge lies on the spine, so the corner line through the node has no direction
        a = net.add_line_path([0, 0, 0], [10, 0, 0], left=0, right=1)
        b = net.add_line_path([10, 0, 0], [20, 0, 0], left=1, right=1)
        with self.assertLogs('widepath', level='WARNING') as logs:
            report = reconcile_at(net, [10, 0, 0])

        self.assertEqual(report.failed, 1)
        self.assertEqual(len(logs.output), 1)
        self.assertTrue(any("cannot be extended" in line for line in logs.output))
        self.assertFalse(b.left_edge.is_valid())
        self.assertTrue(a.left_edge.is_valid())
        self.assertTrue(a.right_edge.is_valid())
        assert_ends_meet(self, a.right_edge.end, b.right_edge.start)
        assert_points_close(self, b.left_edge.end_point, [20, 1, 0], msg="Far end untouched")

    def testSkipsPathsWithoutEdges(self):
        """Test a pair with a missing edge is skipped"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        b = net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        EdgeGenerator.generate_all([a], net.graph)
        node = net.node_at([10, 0, 0])
        entries = AngularSorter.sort_node(node, AngularSorter.build_path_map(net.paths))
        report = EdgeReconciler.reconcile_node(node, entries, net.graph)
        self.assertEqual(report.mitred + report.extended + report.coincident + report.failed, 0)
        assert_points_close(self, a.left_edge.end_point, [10, 1, 0])

    def testNonSpineVertexIgnored(self):
        """Test stray curves on a node do not take part"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        b = net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        stray = net.graph.add_curve(Line([10, 0, 0], [10, -5, 0]))
        net.graph.attach(stray.start, net.node_at([10, 0, 0]))
        report = reconcile_at(net, [10, 0, 0])
        self.assertEqual(len(report.entries), 2)
        assert_points_close(self, stray.start_point, [10, 0, 0])


if __name__ == '__main__':
    unittest.main()
