"""Pytest fixtures for cube sketch tests."""

import tempfile
from types import SimpleNamespace

import pytest

from cubesketch.models import Point


def line_stroke(slope, through, xs):
    """Points on the line with the given slope through a point, at each x."""
    px, py = through
    return [Point(x=x, y=py + slope * (x - px)) for x in xs]


def vertical_stroke(x, ys):
    """Points on the vertical line at x."""
    return [Point(x=x, y=y) for y in ys]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default analysis configuration."""
    from cubesketch.config import AnalysisConfig
    return AnalysisConfig()


@pytest.fixture
def perfect_cube():
    """
    Nine exact strokes of a cube seen from above.

    Left edges meet exactly at (-200, 250), right edges at (1200, 250), and
    the three verticals have constant x.
    """
    left_vp = (-200.0, 250.0)
    right_vp = (1200.0, 250.0)
    xs_left = [250.0 + 15.0 * i for i in range(11)]
    xs_right = [450.0 + 15.0 * i for i in range(11)]
    ys = [380.0 + 20.0 * i for i in range(9)]

    strokes = [
        vertical_stroke(400.0, ys),
        line_stroke(0.2, left_vp, xs_left),
        line_stroke(-0.2, right_vp, xs_right),
        vertical_stroke(450.0, ys),
        line_stroke(0.35, left_vp, xs_left),
        line_stroke(-0.35, right_vp, xs_right),
        vertical_stroke(600.0, ys),
        line_stroke(0.5, left_vp, xs_left),
        line_stroke(-0.5, right_vp, xs_right),
    ]

    return SimpleNamespace(
        strokes=strokes,
        width=1000.0,
        height=800.0,
        left_vp=left_vp,
        right_vp=right_vp,
        verticals=[0, 3, 6],
        left=[1, 4, 7],
        right=[2, 5, 8],
    )


@pytest.fixture
def cube_payload(perfect_cube):
    """The perfect cube as the JSON payload the drawing client posts."""
    return {
        "strokes": [[{"x": p.x, "y": p.y} for p in s] for s in perfect_cube.strokes],
        "width": perfect_cube.width,
        "height": perfect_cube.height,
    }
