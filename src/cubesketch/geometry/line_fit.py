"""
Ideal-line fitting for freehand strokes.

Ordinary least squares in y-on-x form, switching to a vertical fit when the
stroke has almost no horizontal spread. Regressing y on x blows up for
near-vertical strokes, so those are fitted as x = mean(x) instead.
"""

import math

import numpy as np

from cubesketch.config import FittingConfig
from cubesketch.models import ObliqueLine, VerticalLine
from cubesketch.scoring.scores import straightness_score
from cubesketch.tracer import get_tracer, trace


def fit_line(stroke, config=None):
    """
    Fit an ideal line to one stroke.

    Args:
        stroke: list of Point objects in drawing order
        config: AnalysisConfig (optional)

    Returns:
        ObliqueLine or VerticalLine. A stroke with fewer than
        ``fitting.min_points`` points yields an all-zero ObliqueLine flagged
        ``degenerate``.
    """
    fitting = config.fitting if config is not None else FittingConfig()

    if len(stroke) < min_fit_points(config):
        return degenerate_line()

    points = np.array([[p.x, p.y] for p in stroke], dtype=np.float64)
    xs = points[:, 0]
    ys = points[:, 1]

    mean_x = xs.mean()
    mean_y = ys.mean()
    dx = xs - mean_x
    dy = ys - mean_y

    variance_x = np.mean(dx * dx)

    if variance_x < fitting.vertical_variance_threshold:
        rmse = float(np.sqrt(variance_x))
        return VerticalLine(
            x=float(mean_x),
            rmse=rmse,
            straightness_score=straightness_score(rmse, config),
        )

    slope = float(np.sum(dx * dy) / np.sum(dx * dx))
    intercept = float(mean_y - slope * mean_x)

    residuals = ys - (slope * xs + intercept)
    rmse = float(np.sqrt(np.mean(residuals * residuals)))

    return ObliqueLine(
        slope=slope,
        intercept=intercept,
        angle_degrees=math.degrees(math.atan(slope)),
        rmse=rmse,
        straightness_score=straightness_score(rmse, config),
    )


def min_fit_points(config=None):
    """Smallest stroke length that gets a real fit."""
    fitting = config.fitting if config is not None else FittingConfig()
    return max(fitting.min_points, 2)


def degenerate_line():
    """Zero-valued line standing in for a stroke too short to fit."""
    return ObliqueLine(
        slope=0.0,
        intercept=0.0,
        angle_degrees=0.0,
        rmse=0.0,
        straightness_score=0.0,
        degenerate=True,
    )


@trace(label="fit_lines")
def fit_lines(strokes, config=None):
    """
    Fit one ideal line per stroke, preserving input order.

    Returns:
        list of fitted lines, same length as strokes
    """
    tracer = get_tracer()

    lines = []
    for idx, stroke in enumerate(strokes):
        line = fit_line(stroke, config)
        if line.degenerate:
            tracer.event(f"Stroke {idx} has {len(stroke)} point(s), cannot fit a line", level="WARN")
        else:
            tracer.event(
                f"Stroke {idx}: {line.kind} angle={line.angle_degrees:.1f} rmse={line.rmse:.2f}",
                level="DEBUG",
            )
        lines.append(line)

    vertical_count = sum(1 for line in lines if line.kind == "vertical")
    tracer.event(f"Fitted {len(lines)} lines ({vertical_count} vertical)")

    return lines
