"""Pytest configuration and fixtures for pathword tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def single_puncture():
    """One puncture labeled A at (5, 5)."""
    from pathword.pathword import puncture_set
    return puncture_set([((5.0, 5.0), "A")])


@pytest.fixture
def two_punctures():
    """Punctures A at (4, 3) and B at (7, 1)."""
    from pathword.pathword import puncture_set
    return puncture_set([((4.0, 3.0), "A"), ((7.0, 1.0), "B")])


@pytest.fixture
def double_loop_nodes():
    """Path winding twice around (5, 5) before heading off to (10, 0)."""
    return [
        (0.0, 0.0),
        (3.0, 6.0),
        (7.0, 6.0),
        (4.0, 4.0),
        (3.0, 6.0),
        (7.0, 6.0),
        (10.0, 0.0),
    ]


@pytest.fixture
def figure_eight_nodes():
    """Loop around A, then around B, then around A again, ending at the start."""
    return [
        (5.5, 2.0),
        (5.5, 4.0),
        (2.0, 4.0),
        (2.0, 2.0),
        (5.5, 2.0),
        (5.5, 0.0),
        (8.5, 0.0),
        (8.5, 2.0),
        (5.5, 2.0),
        (5.5, 4.0),
        (2.0, 4.0),
        (2.0, 2.0),
        (5.5, 2.0),
    ]
