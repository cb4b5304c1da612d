"""
Unit tests for NodeExtractor and AngularSorter.
"""

import math
import unittest

from widepath import Line, PolyLine, PathEnd
from widepath.elements.solvers import AngularSorter, NodeExtractor
from tests.test_fixtures import NetworkBuilder


class NodeExtractorTests(unittest.TestCase):
    """Tests for collecting the nodes of a path network"""

    def testEncounterOrderWithoutDuplicates(self):
        """Test nodes come back once each, in the order spines reference them"""
        net = NetworkBuilder()
        net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        nodes = NodeExtractor.extract_nodes(net.paths, net.graph)
        self.assertEqual([n.handle for n in nodes], [0, 1, 2])
        self.assertIs(nodes[1], net.node_at([10, 0, 0]))
        self.assertEqual(len(nodes[1].vertices), 2)

    def testUnattachedAndMissingSpines(self):
        """Test unattached ends and null spines contribute nothing"""
        net = NetworkBuilder()
        net.add_line_path([0, 0, 0], [10, 0, 0], width=2, attach=False)
        a = net.add_line_path([20, 0, 0], [30, 0, 0], width=2, attach=False)
        net.attach(a.spine.end)
        net.add_path(Line([50, 0, 0], [60, 0, 0]), width=2, attach=False)
        net.paths[-1].spine = None

        nodes = NodeExtractor.extract_nodes(net.paths, net.graph)
        self.assertEqual(len(nodes), 1)
        self.assertIs(nodes[0], net.node_at([30, 0, 0]))

    def testDeadEndCount(self):
        """Test counting nodes touched by a single path"""
        net = NetworkBuilder()
        net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        net.add_line_path([10, 0, 0], [20, 0, 0], width=2)
        self.assertEqual(NodeExtractor.dead_end_count(net.paths), 3)
        self.assertEqual(NodeExtractor.path_counts(net.paths)[net.node_at([10, 0, 0]).handle], 3)


class AngularSorterTests(unittest.TestCase):
    """Tests for ordering spine ends around a node"""

    def testOutwardAngles(self):
        """Test start vertices use the start tangent and end vertices the reversed end tangent"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        b = net.add_line_path([10, 0, 0], [10, 10, 0], width=2)
        self.assertAlmostEqual(AngularSorter.outward_angle(a, a.spine.end), math.pi)
        self.assertAlmostEqual(AngularSorter.outward_angle(b, b.spine.start), 0.5 * math.pi)
        self.assertAlmostEqual(AngularSorter.outward_angle(a, a.spine.start), 0.0)

    def testSortAnticlockwise(self):
        """Test four paths leaving a node are sorted anticlockwise from +X"""
        net = NetworkBuilder()
        south = net.add_line_path([0, 0, 0], [0, -5, 0], width=1)
        west = net.add_line_path([-5, 0, 0], [0, 0, 0], width=1)
        east = net.add_line_path([0, 0, 0], [5, 0, 0], width=1)
        north = net.add_line_path([0, 5, 0], [0, 0, 0], width=1)

        path_map = AngularSorter.build_path_map(net.paths)
        entries = AngularSorter.sort_node(net.node_at([0, 0, 0]), path_map)

        self.assertEqual([e.path for e in entries], [east, north, west, south])
        self.assertEqual([e.end for e in entries], [PathEnd.START, PathEnd.END, PathEnd.END, PathEnd.START])
        angles = [e.angle for e in entries]
        self.assertTrue(all(0.0 <= a < 2 * math.pi for a in angles))
        self.assertEqual(angles, sorted(angles))

    def testTieBreakByInputOrder(self):
        """Test paths leaving at the same angle are ordered by their input index"""
        net = NetworkBuilder()
        long_path = net.add_line_path([0, 0, 0], [10, 0, 0], width=1)
        short_path = net.add_line_path([0, 0, 0], [5, 0, 0], width=1)
        node = net.node_at([0, 0, 0])

        entries = AngularSorter.sort_node(node, AngularSorter.build_path_map([long_path, short_path]))
        self.assertEqual([e.path for e in entries], [long_path, short_path])

        entries = AngularSorter.sort_node(node, AngularSorter.build_path_map([short_path, long_path]))
        self.assertEqual([e.path for e in entries], [short_path, long_path])
        self.assertEqual(entries[0].angle, entries[1].angle)

    def testTieBreakStartBeforeEnd(self):
        """Test a loop leaving and returning along the same direction sorts its start first"""
        net = NetworkBuilder()
        # Leaves heading east and comes back heading west: both outward directions are +X
        loop = net.add_path(PolyLine([[0, 0, 0], [5, 0, 0], [5, 3, 0], [10, 3, 0], [10, 0, 0], [0, 0, 0]]),
                            width=1)
        node = net.node_at([0, 0, 0])
        self.assertEqual(len(node.vertices), 2)

        entries = AngularSorter.sort_node(node, AngularSorter.build_path_map([loop]))
        self.assertEqual([e.end for e in entries], [PathEnd.START, PathEnd.END])
        self.assertEqual(entries[0].angle, entries[1].angle)

    def testSnappedAnglesTie(self):
        """Test direction noise below the angle tolerance does not break a tie"""
        net = NetworkBuilder()
        out = net.add_line_path([0, 0, 0], [5, 0, 0], width=1)
        back = net.add_line_path([5, 1e-12, 0], [0, 0, 0], width=1)
        entries = AngularSorter.sort_node(net.node_at([0, 0, 0]), AngularSorter.build_path_map(net.paths))
        self.assertEqual([e.path for e in entries], [out, back])
        self.assertEqual(entries[0].angle, entries[1].angle)

    def testIgnoresNonSpineVertices(self):
        """Test vertices of curves that are not path spines are skipped"""
        net = NetworkBuilder()
        a = net.add_line_path([0, 0, 0], [10, 0, 0], width=2)
        stray = net.graph.add_curve(Line([10, 0, 0], [10, -3, 0]))
        node = net.node_at([10, 0, 0])
        net.graph.attach(stray.start, node)

        entries = AngularSorter.sort_node(node, AngularSorter.build_path_map(net.paths))
        self.assertEqual(len(entries), 1)
        self.assertIs(entries[0].path, a)

    def testDeterministic(self):
        """Test sorting the same node twice gives the same order"""
        net = NetworkBuilder()
        for angle in (0.3, 2.1, 4.4, 5.9):
            net.add_line_path([0, 0, 0], [math.cos(angle), math.sin(angle), 0], width=0.2)
        path_map = AngularSorter.build_path_map(net.paths)
        node = net.node_at([0, 0, 0])
        first = [e.path for e in AngularSorter.sort_node(node, path_map)]
        second = [e.path for e in AngularSorter.sort_node(node, path_map)]
        self.assertEqual(first, second)
        self.assertEqual(first, net.paths)


if __name__ == '__main__':
    unittest.main()
