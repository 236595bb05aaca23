"""Tests for the piecewise-linear path."""

import numpy as np
import pytest

from pathword.pathword import EmptyPathError, PLPath, Point, puncture_set


class TestEndpoints:
    """Tests for start/end access and tail mutation."""

    def test_start_and_end(self):
        path = PLPath([(0, 0), (1, 1), (2, 0)])
        assert path.start() == Point(0.0, 0.0)
        assert path.end() == Point(2.0, 0.0)

    def test_empty_path_raises(self):
        """An empty path has no endpoints."""
        path = PLPath()
        with pytest.raises(EmptyPathError):
            path.start()
        with pytest.raises(IndexError):
            path.end()

    def test_push(self):
        path = PLPath([(0, 0)])
        path.push((3, 4))
        assert path.end() == (3.0, 4.0)
        assert len(path) == 2

    def test_pop_returns_last(self):
        path = PLPath([(0, 0), (1, 1)])
        assert path.pop() == (1.0, 1.0)
        assert path.nodes == ((0.0, 0.0),)

    def test_pop_never_empties(self):
        """The last remaining node cannot be popped."""
        path = PLPath([(0, 0)])
        assert path.pop() is None
        assert len(path) == 1


class TestReverseConcatenate:
    """Tests for operations returning new paths."""

    def test_reverse(self):
        path = PLPath([(0, 0), (1, 1), (2, 0)])
        reversed_path = path.reverse()
        assert reversed_path.nodes == ((2.0, 0.0), (1.0, 1.0), (0.0, 0.0))
        assert path.start() == (0.0, 0.0)

    def test_concatenate_keeps_seam(self):
        """Concatenation does not deduplicate the shared node."""
        joined = PLPath([(0, 0), (1, 1)]).concatenate(PLPath([(1, 1), (2, 0)]))
        assert joined.nodes == ((0.0, 0.0), (1.0, 1.0), (1.0, 1.0), (2.0, 0.0))


class TestSegments:
    """Tests for closed-loop segment enumeration."""

    def test_open_path_gets_closing_segment(self):
        path = PLPath([(0, 0), (1, 1), (2, 0)])
        assert list(path.segments()) == [
            ((0.0, 0.0), (1.0, 1.0)),
            ((1.0, 1.0), (2.0, 0.0)),
            ((2.0, 0.0), (0.0, 0.0)),
        ]

    def test_closed_path_has_no_closing_segment(self):
        path = PLPath([(0, 0), (1, 1), (2, 0), (0, 0)])
        assert len(list(path.segments())) == 3

    def test_single_node_has_no_segments(self):
        assert list(PLPath([(1, 1)]).segments()) == []

    def test_restartable(self):
        """Each call enumerates the loop from the beginning."""
        path = PLPath([(0, 0), (1, 1), (2, 0)])
        assert list(path.segments()) == list(path.segments())


class TestArrays:
    """Tests for numpy exchange."""

    def test_to_array(self):
        array = PLPath([(0, 0), (1, 2)]).to_array()
        assert array.shape == (2, 2)
        np.testing.assert_array_equal(array, [[0.0, 0.0], [1.0, 2.0]])

    def test_from_array(self):
        path = PLPath.from_array(np.array([[0.0, 0.0], [3.0, 1.0]]))
        assert path.nodes == ((0.0, 0.0), (3.0, 1.0))

    def test_from_array_bad_shape(self):
        with pytest.raises(ValueError):
            PLPath.from_array(np.zeros((3, 3)))


class TestAutoPath:
    """Tests for detour construction around punctures."""

    def test_straight_line_when_clear(self):
        punctures = puncture_set([((2.0, 1.0), "A")])
        path = PLPath.auto((0, 0), (4, 0), punctures)
        assert path == PLPath.line((0, 0), (4, 0))

    def test_detour_around_puncture_on_line(self):
        """A puncture on the line is avoided by a nudged midpoint."""
        punctures = puncture_set([((2.0, 0.0), "A")])
        path = PLPath.auto((0, 0), (4, 0), punctures)
        assert path.nodes == ((0.0, 0.0), (2.0, 0.25), (4.0, 0.0))
        assert not path.has_collision(punctures)

    def test_collision_needs_two_nodes(self):
        with pytest.raises(ValueError):
            PLPath([(0, 0)]).has_collision(())

    def test_remove_redundant_nodes(self):
        """Interior nodes with an empty corner triangle are dropped."""
        path = PLPath([(0, 0), (1, 0), (2, 0), (3, 3), (4, 0)])
        path.remove_redundant_nodes(puncture_set([((3.0, 1.0), "A")]))
        assert path.nodes == ((0.0, 0.0), (3.0, 3.0), (4.0, 0.0))
