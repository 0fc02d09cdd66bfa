"""
Intersection of two fitted lines.
"""

from cubesketch.config import IntersectionConfig
from cubesketch.models import Point


def intersect_lines(line1, line2, config=None):
    """
    Find where two fitted lines cross.

    Returns a Point, or None when the lines are parallel: two verticals, or
    two oblique lines whose slopes differ by less than
    ``intersection.parallel_slope_tolerance``.
    """
    tolerance = (config.intersection if config is not None else IntersectionConfig()).parallel_slope_tolerance

    if line1.kind == "vertical" and line2.kind == "vertical":
        return None
    if line1.kind == "vertical":
        return Point(x=line1.x, y=line2.y_at(line1.x))
    if line2.kind == "vertical":
        return Point(x=line2.x, y=line1.y_at(line2.x))

    if abs(line1.slope - line2.slope) < tolerance:
        return None

    # m1*x + b1 = m2*x + b2
    x = (line2.intercept - line1.intercept) / (line1.slope - line2.slope)
    return Point(x=x, y=line1.y_at(x))
