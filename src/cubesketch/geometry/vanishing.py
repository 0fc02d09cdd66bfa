"""
Vanishing-point estimation for a group of converging lines.

Every unordered pair of lines in the group is intersected. The vanishing
point is the centroid of those intersections and the convergence error is
their mean distance from it, so a perfectly drawn group scores 0.
"""

from itertools import combinations

import numpy as np

from cubesketch.geometry.intersection import intersect_lines
from cubesketch.models import EstimatedVanishingPoint, UnavailableVanishingPoint, compute_centroid
from cubesketch.tracer import get_tracer, trace


@trace(label="estimate_vanishing_point")
def estimate_vanishing_point(lines, indices, config=None):
    """
    Estimate the vanishing point of one group.

    Args:
        lines: all fitted lines of the sketch
        indices: indices into lines forming the group
        config: AnalysisConfig (optional)

    Returns:
        EstimatedVanishingPoint, or UnavailableVanishingPoint when the group
        has fewer than 2 usable lines or every pair is parallel.
    """
    tracer = get_tracer()

    if len(indices) < 2:
        tracer.event(f"Group {list(indices)} has fewer than 2 lines", level="WARN")
        return UnavailableVanishingPoint(reason="group has fewer than 2 lines")

    usable = [i for i in indices if not lines[i].degenerate]
    if len(usable) < 2:
        tracer.event(f"Group {list(indices)} has fewer than 2 fittable lines", level="WARN")
        return UnavailableVanishingPoint(reason="group has fewer than 2 fittable lines")

    intersections = []
    for i, j in combinations(usable, 2):
        point = intersect_lines(lines[i], lines[j], config)
        if point is None:
            tracer.event(f"Lines {i} and {j} are parallel", level="DEBUG")
            continue
        intersections.append(point)

    if not intersections:
        tracer.event(f"All line pairs in group {list(indices)} are parallel", level="WARN")
        return UnavailableVanishingPoint(reason="all line pairs are parallel")

    centroid = compute_centroid(intersections)
    convergence_error = convergence_spread(intersections, centroid)

    tracer.event(
        f"Vanishing point ({centroid.x:.1f}, {centroid.y:.1f}) "
        f"from {len(intersections)} intersections, error={convergence_error:.2f}"
    )

    return EstimatedVanishingPoint(
        centroid=centroid,
        convergence_error=convergence_error,
        intersections=intersections,
    )


def convergence_spread(points, centroid):
    """Mean Euclidean distance of points from centroid."""
    coords = np.array([[p.x, p.y] for p in points], dtype=np.float64)
    center = np.array([centroid.x, centroid.y], dtype=np.float64)
    return float(np.mean(np.linalg.norm(coords - center, axis=1)))
