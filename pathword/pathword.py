# =============================================================================
# Pathword: Homotopy Words for Paths in a Punctured Plane
# =============================================================================
# This module tracks a point moving through a plane that contains a finite set
# of labeled puncture points. As the point moves, the traced polyline is kept
# short by a greedy trailing-edge simplification, and the homotopy class of
# the closed loop (path plus an implicit edge back to the start) is kept as a
# reduced word in the free group generated by the puncture labels.
# =============================================================================

import logging
from typing import Dict, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# =============================================================================
# TOLERANCE AND SUBDIVISION CONSTANTS
# =============================================================================
# A single tolerance is shared by every geometric predicate: barycentric
# weights, degenerate triangle area, the pruning x-band and the collinearity
# test all use EPSILON unless a caller passes its own value.

EPSILON = 1e-4

NUDGE_AMOUNT = 0.25          # Normal offset of a subdivision midpoint
MAX_SUBDIVISION_DEPTH = 10   # Subdivision rounds tried by PLPath.auto


class EmptyPathError(IndexError):
    """Raised when the start or end of a path without nodes is requested."""


# =============================================================================
# POINT
# =============================================================================

class Point(NamedTuple):
    """
    Immutable 2D point. Compares equal to a plain (x, y) tuple.
    """

    x: float
    y: float

    def __sub__(self, other):
        return Point(self.x - other.x, self.y - other.y)

    def __repr__(self):
        return "Point(%g, %g)" % (self.x, self.y)


def as_point(value) -> Point:
    """
    Coerce a point-like value into a Point.

    Args:
        value: A Point, an (x, y) pair or a length-2 numpy array

    Returns:
        The value as a Point with float coordinates

    Raises:
        ValueError: If the value does not unpack into two coordinates
    """
    if isinstance(value, Point):
        return value
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ValueError("expected an (x, y) pair, got %r" % (value,))
    return Point(float(x), float(y))


def cross(ax: float, ay: float, bx: float, by: float) -> float:
    """2D cross product of the vectors (ax, ay) and (bx, by)."""
    return ax * by - ay * bx


# =============================================================================
# PUNCTURE POINTS
# =============================================================================
# A puncture is a labeled point removed from the plane. Its label is stored
# upper-cased; in a word, the upper-case letter and the lower-case letter
# denote the two orientations of a loop around the same puncture.

class PuncturePoint:
    """
    Immutable labeled puncture with the predicates used by path pruning
    and winding accumulation.
    """

    __slots__ = ("_position", "_label")

    def __init__(self, position, label: str):
        """
        Args:
            position: Location of the puncture, any point-like value
            label: Single character naming the puncture; upper-cased
        """
        object.__setattr__(self, "_position", as_point(position))
        object.__setattr__(self, "_label", str(label).upper())

    def __setattr__(self, name, value):
        raise AttributeError("PuncturePoint is immutable")

    @property
    def position(self) -> Point:
        return self._position

    @property
    def label(self) -> str:
        return self._label

    def __eq__(self, other):
        if not isinstance(other, PuncturePoint):
            return NotImplemented
        return self._position == other._position and self._label == other._label

    def __hash__(self):
        return hash((self._position, self._label))

    def __repr__(self):
        return "PuncturePoint(%r, %r)" % (self._position, self._label)

    def is_in_triangle(self, p1, p2, p3, eps: float = EPSILON) -> bool:
        """
        Barycentric containment test against the triangle p1 p2 p3.

        Points on the boundary count as inside, within eps. A degenerate
        triangle (|denominator| <= eps) never contains anything.

        Args:
            p1, p2, p3: Triangle vertices
            eps: Tolerance for the weights and the degenerate-area check

        Returns:
            True if the puncture lies inside or on the triangle
        """
        p1, p2, p3 = as_point(p1), as_point(p2), as_point(p3)
        p = self._position
        denom = (p2.y - p3.y) * (p1.x - p3.x) + (p3.x - p2.x) * (p1.y - p3.y)
        if abs(denom) <= eps:
            return False
        a = ((p2.y - p3.y) * (p.x - p3.x) + (p3.x - p2.x) * (p.y - p3.y)) / denom
        b = ((p3.y - p1.y) * (p.x - p3.x) + (p1.x - p3.x) * (p.y - p3.y)) / denom
        c = 1.0 - a - b
        return all(-eps <= w <= 1.0 + eps for w in (a, b, c))

    def should_not_remove(self, p1, p2, p3, eps: float = EPSILON) -> bool:
        """
        Decide whether dropping the middle node p2 of p1 -> p2 -> p3 would
        move the segment across this puncture.

        The node must stay if the puncture is inside the triangle p1 p2 p3,
        or if the path turns back in x just past the puncture: the puncture's
        x lies strictly between p1.x and p2.x, within eps of p2.x, while the
        path keeps going the same way in x towards p3.

        Args:
            p1, p2, p3: Three consecutive path nodes
            eps: Tolerance shared with the triangle test

        Returns:
            True if p2 must be kept
        """
        p1, p2, p3 = as_point(p1), as_point(p2), as_point(p3)
        if self.is_in_triangle(p1, p2, p3, eps):
            return True
        x = self._position.x
        if abs(x - p2.x) >= eps:
            return False
        if p1.x < x < p2.x and p2.x < p3.x:
            return True
        if p2.x < x < p1.x and p3.x < p2.x:
            return True
        return False

    def winding_update(self, start, end) -> Optional[int]:
        """
        Winding contribution of the directed segment start -> end.

        The sign of (puncture - start) x (end - start) gives the sense of
        rotation: +1 when the puncture lies to the right of the segment,
        -1 when it lies to the left. Only segments crossing the vertical
        line through the puncture contribute, using the half-open range
        min(start.x, end.x) <= x < max(start.x, end.x); vertical motion
        never counts and a crossing through a shared vertex counts once.

        Args:
            start: Segment start point
            end: Segment end point

        Returns:
            +1, -1, or None if the segment does not straddle the puncture
        """
        start, end = as_point(start), as_point(end)
        to_puncture = self._position - start
        segment = end - start
        product = cross(to_puncture.x, to_puncture.y, segment.x, segment.y)
        if product == 0:
            return None
        smaller, larger = min(start.x, end.x), max(start.x, end.x)
        if not smaller <= self._position.x < larger:
            return None
        return 1 if product > 0 else -1

    def is_between(self, p1, p2, eps: float = EPSILON) -> bool:
        """
        True if the puncture sits on the open segment p1 p2: within eps of
        the supporting line and strictly between the endpoints.
        """
        p1, p2 = as_point(p1), as_point(p2)
        segment = p2 - p1
        to_puncture = self._position - p1
        length_sq = segment.x * segment.x + segment.y * segment.y
        if length_sq == 0:
            return False
        distance = abs(cross(segment.x, segment.y, to_puncture.x, to_puncture.y)) / length_sq ** 0.5
        if distance > eps:
            return False
        along = segment.x * to_puncture.x + segment.y * to_puncture.y
        return 0 < along < length_sq


def puncture_set(pairs: Iterable[Tuple[object, str]]) -> Tuple[PuncturePoint, ...]:
    """
    Build a shareable puncture configuration.

    Args:
        pairs: Ordered (position, label) pairs

    Returns:
        A tuple of PuncturePoint, safe to hand to any number of PathTypes
    """
    return tuple(PuncturePoint(position, label) for position, label in pairs)


def puncture_array(puncture_points: Sequence[PuncturePoint]) -> np.ndarray:
    """Positions of the punctures as an (n, 2) float array, for rendering."""
    return np.array([p.position for p in puncture_points], dtype=float).reshape(-1, 2)


# =============================================================================
# PIECEWISE-LINEAR PATH
# =============================================================================
# An ordered polyline. The first node is the start of travel and the last is
# the current end; only the tail is ever rewritten in place.

class PLPath:
    """
    Ordered sequence of 2D nodes forming a polyline.
    """

    def __init__(self, nodes: Iterable = ()):
        """
        Args:
            nodes: Point-like values in travel order
        """
        self._nodes = [as_point(n) for n in nodes]

    @classmethod
    def line(cls, start, end) -> "PLPath":
        """A straight path with no intermediate nodes."""
        return cls([start, end])

    @classmethod
    def from_array(cls, array) -> "PLPath":
        """
        Build a path from an (n, 2) array of coordinates.

        Raises:
            ValueError: If the array is not of shape (n, 2)
        """
        array = np.asarray(array, dtype=float)
        if array.ndim != 2 or array.shape[1] != 2:
            raise ValueError("expected an (n, 2) array, got shape %s" % (array.shape,))
        return cls(Point(float(x), float(y)) for x, y in array)

    @classmethod
    def auto(
        cls,
        start,
        end,
        puncture_points: Sequence[PuncturePoint],
        nudge: float = NUDGE_AMOUNT,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> "PLPath":
        """
        Build a path from start to end that does not run through a puncture.

        Starting from the straight line, every segment with a puncture lying
        on it is split at its midpoint, and the midpoint is pushed off the
        segment along its left normal by `nudge`. This repeats until no
        segment collides or `max_depth` rounds have been tried.

        Args:
            start: First node
            end: Last node
            puncture_points: Punctures to avoid
            nudge: Distance the midpoint is moved off the segment
            max_depth: Maximum number of subdivision rounds

        Returns:
            The detour path (still colliding only if max_depth ran out)
        """
        path = cls.line(start, end)
        for _ in range(max_depth):
            if not path.has_collision(puncture_points):
                return path
            path = path._subdivide(puncture_points, nudge)
        if path.has_collision(puncture_points):
            logger.warning(
                "path from %r to %r still crosses a puncture after %d subdivisions",
                path.start(), path.end(), max_depth,
            )
        return path

    def _subdivide(self, puncture_points, nudge):
        nodes = [self._nodes[0]]
        for a, b in zip(self._nodes, self._nodes[1:]):
            if any(p.is_between(a, b) for p in puncture_points):
                dx, dy = b.x - a.x, b.y - a.y
                length = (dx * dx + dy * dy) ** 0.5
                if length > 0:
                    nodes.append(Point(
                        (a.x + b.x) / 2 - dy / length * nudge,
                        (a.y + b.y) / 2 + dx / length * nudge,
                    ))
            nodes.append(b)
        path = PLPath(nodes)
        path.remove_redundant_nodes(puncture_points)
        return path

    @property
    def nodes(self) -> Tuple[Point, ...]:
        return tuple(self._nodes)

    def __len__(self):
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)

    def __eq__(self, other):
        if not isinstance(other, PLPath):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self):
        return "PLPath(%r)" % (self._nodes,)

    def start(self) -> Point:
        if not self._nodes:
            raise EmptyPathError("empty path has no start point")
        return self._nodes[0]

    def end(self) -> Point:
        if not self._nodes:
            raise EmptyPathError("empty path has no end point")
        return self._nodes[-1]

    def get(self, index: int) -> Point:
        return self._nodes[index]

    def push(self, point) -> None:
        """Append a node at the end of the path."""
        self._nodes.append(as_point(point))

    def pop(self) -> Optional[Point]:
        """
        Remove and return the last node.

        A path never shrinks below one node: with one node or fewer left,
        nothing is removed and None is returned.
        """
        if len(self._nodes) <= 1:
            logger.debug("refusing to pop the last node of %r", self)
            return None
        return self._nodes.pop()

    def reverse(self) -> "PLPath":
        """Return a new path with the node order flipped."""
        return PLPath(reversed(self._nodes))

    def concatenate(self, other: "PLPath") -> "PLPath":
        """Return a new path with other's nodes after this path's nodes."""
        return PLPath(self._nodes + other._nodes)

    def segments(self) -> Iterator[Tuple[Point, Point]]:
        """
        Segments of the closed loop formed by this path.

        Yields every consecutive node pair, followed by a closing segment
        from the end back to the start when the two differ. Each call
        returns a fresh generator.
        """
        nodes = self._nodes
        for i in range(len(nodes) - 1):
            yield nodes[i], nodes[i + 1]
        if len(nodes) > 1 and nodes[-1] != nodes[0]:
            yield nodes[-1], nodes[0]

    def has_collision(self, puncture_points: Sequence[PuncturePoint]) -> bool:
        """
        True if any puncture lies on one of the path's segments.

        Raises:
            ValueError: If the path has fewer than two nodes
        """
        if len(self._nodes) < 2:
            raise ValueError("a path needs at least two nodes to have segments")
        return any(
            p.is_between(a, b)
            for a, b in zip(self._nodes, self._nodes[1:])
            for p in puncture_points
        )

    def remove_redundant_nodes(self, puncture_points: Sequence[PuncturePoint]) -> None:
        """Drop interior nodes whose corner triangle contains no puncture."""
        i = 1
        while i + 1 < len(self._nodes):
            p1, p2, p3 = self._nodes[i - 1], self._nodes[i], self._nodes[i + 1]
            if any(p.is_in_triangle(p1, p2, p3) for p in puncture_points):
                i += 1
            else:
                del self._nodes[i]

    def to_array(self) -> np.ndarray:
        """Nodes as an (n, 2) float array, for rendering."""
        return np.array(self._nodes, dtype=float).reshape(-1, 2)


# =============================================================================
# FREE-GROUP WORD REDUCTION
# =============================================================================

def simplify_word(word: str) -> str:
    """
    Reduce a word in the free group on the puncture labels.

    Scans left to right; whenever two adjacent letters are the same label
    in opposite case, both are deleted and the scan steps back one position
    so the newly adjacent pair is checked too. Letters are compared as whole
    characters, so non-ASCII labels are handled like any other.

    Args:
        word: Word where case marks orientation, e.g. "aBbA"

    Returns:
        The reduced word (no adjacent inverse pairs remain)
    """
    letters = list(word)
    i = 0
    while i + 1 < len(letters):
        a, b = letters[i], letters[i + 1]
        if a != b and a.upper() == b.upper():
            del letters[i:i + 2]
            i = max(i - 1, 0)
        else:
            i += 1
    return "".join(letters)


# =============================================================================
# PATH TYPE
# =============================================================================
# The tracked path of one moving entity. Geometry (pruning of redundant tail
# nodes) and algebra (winding accumulation and word reduction) meet here.

class PathType:
    """
    A path in the punctured plane together with the reduced word of the
    loop it closes.

    The puncture tuple is shared and never mutated. The cached word is
    recomputed after every change to the path, so word() is never stale.
    """

    def __init__(self, start, puncture_points: Sequence[PuncturePoint]):
        """
        Args:
            start: Initial position of the tracked point
            puncture_points: Puncture configuration; a tuple is shared as-is
        """
        self._path = PLPath([start])
        self._puncture_points = _freeze(puncture_points)
        self._word = ""
        self._update_word()

    @classmethod
    def from_path(cls, path, puncture_points: Sequence[PuncturePoint]) -> "PathType":
        """
        Adopt an existing path and compute its word immediately.

        Args:
            path: A PLPath (taken over, not copied) or a sequence of points
            puncture_points: Puncture configuration

        Raises:
            EmptyPathError: If the path has no nodes
        """
        if not isinstance(path, PLPath):
            path = PLPath(path)
        if not len(path):
            raise EmptyPathError("cannot build a path type from an empty path")
        path_type = cls(path.start(), puncture_points)
        path_type._path = path
        path_type._update_word()
        return path_type

    def __repr__(self):
        return "PathType(nodes=%d, word=%r)" % (len(self._path), self._word)

    @property
    def current_path(self) -> PLPath:
        return self._path

    @property
    def puncture_points(self) -> Tuple[PuncturePoint, ...]:
        return self._puncture_points

    @property
    def nodes(self) -> Tuple[Point, ...]:
        return self._path.nodes

    def word(self) -> str:
        """Reduced word of the closed loop, as of the last mutation."""
        return self._word

    def segments(self) -> Iterator[Tuple[Point, Point]]:
        """Segments of the closed loop, for rendering."""
        return self._path.segments()

    def push(self, point) -> None:
        """
        Report a new position of the tracked point.

        While the last node is redundant (no puncture objects to replacing
        last-but-one -> last -> point with a single segment), it is popped.
        The point is then appended and the word recomputed. Only the tail
        is ever pruned, so the start of the path never changes.

        Args:
            point: New position
        """
        point = as_point(point)
        path = self._path
        pruned = 0
        while len(path) >= 2:
            p1, p2 = path.get(-2), path.get(-1)
            if any(p.should_not_remove(p1, p2, point) for p in self._puncture_points):
                break
            path.pop()
            pruned += 1
        path.push(point)
        if pruned:
            logger.debug("pruned %d redundant node(s) before %r", pruned, point)
        self._update_word()

    def pop(self) -> Optional[Point]:
        """Remove the last node (never the only one) and recompute the word."""
        node = self._path.pop()
        if node is not None:
            self._update_word()
        return node

    def reverse(self) -> None:
        """Reverse the direction of travel in place."""
        self._path = self._path.reverse()
        self._update_word()

    def concatenate(self, other: PLPath) -> "PathType":
        """New path type following this path with other, same punctures."""
        return PathType.from_path(self._path.concatenate(other), self._puncture_points)

    def crossings(self) -> Iterator[Tuple[int, str, int]]:
        """
        Raw winding contributions of the closed loop.

        Yields:
            (segment index, puncture label, +1 or -1) in traversal order
        """
        for index, (start, end) in enumerate(self._path.segments()):
            for puncture in self._puncture_points:
                n = puncture.winding_update(start, end)
                if n is not None:
                    yield index, puncture.label, n

    def winding_numbers(self) -> Dict[str, int]:
        """Net number of full turns of the closed loop around each label."""
        totals = {p.label: 0 for p in self._puncture_points}
        for _, label, n in self.crossings():
            totals[label] += n
        return {label: int(total / 2) for label, total in totals.items()}

    def _update_word(self) -> None:
        # A full turn around a puncture crosses its vertical line twice, so
        # half-turns accumulate per label until they reach +/-2.
        half_turns = {p.label: 0 for p in self._puncture_points}
        letters = []
        for _, label, n in self.crossings():
            half_turns[label] += n
            if half_turns[label] == 2:
                letters.append(label.lower())
                half_turns[label] = 0
            elif half_turns[label] == -2:
                letters.append(label)
                half_turns[label] = 0
        self._word = simplify_word("".join(letters))


def _freeze(puncture_points) -> Tuple[PuncturePoint, ...]:
    if isinstance(puncture_points, tuple):
        return puncture_points
    return tuple(puncture_points)


def track(path_type: PathType, positions: Iterable) -> str:
    """
    Drive a path type from a sequence of positions.

    For hosts without an update loop of their own: every position is pushed
    in order, and the resulting word is returned.
    """
    for position in positions:
        path_type.push(position)
    return path_type.word()
