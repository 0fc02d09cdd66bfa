"""
Main analysis orchestrator for the cube sketch analyzer.

Runs fit -> cluster -> vanishing points -> scores -> render for one sketch
and assembles the AnalysisResult. Pure given its inputs: no shared state,
no randomness, nothing written to disk.
"""

from cubesketch.config import AnalysisConfig
from cubesketch.errors import ShapeError
from cubesketch.geometry.clustering import cluster_lines
from cubesketch.geometry.line_fit import fit_lines
from cubesketch.geometry.vanishing import estimate_vanishing_point
from cubesketch.models import (
    AnalysisResult, convergence_error_of, vanishing_point_of,
)
from cubesketch.render.overlay import encode_png_data_uri, render_overlay
from cubesketch.scoring.scores import average_score, perspective_score
from cubesketch.tracer import get_tracer, trace
from cubesketch.validate.rules import run_checks, validate_request


@trace(label="analyze_strokes")
def analyze_strokes(strokes, width, height, config=None):
    """
    Analyze one perspective-cube sketch.

    Args:
        strokes: list of strokes, each a list of Point objects
        width: canvas width
        height: canvas height
        config: AnalysisConfig (optional)

    Returns:
        AnalysisResult

    Raises:
        ShapeError: wrong stroke count or unusable canvas dimensions
        EncodingError: the overlay image could not be encoded
    """
    tracer = get_tracer()

    if config is None:
        config = AnalysisConfig()

    errors = validate_request(strokes, width, height, config.expected_strokes)
    if errors:
        for error in errors:
            tracer.event(error, level="ERROR")
        raise ShapeError(errors)

    with tracer.span("fit", module="pipeline"):
        lines = fit_lines(strokes, config)

    with tracer.span("cluster", module="pipeline"):
        groups = cluster_lines(lines, config)

    with tracer.span("vanishing_points", module="pipeline"):
        left = estimate_vanishing_point(lines, groups.left, config)
        right = estimate_vanishing_point(lines, groups.right, config)

    with tracer.span("score", module="pipeline"):
        line_scores = [line.straightness_score for line in lines]
        error_l = convergence_error_of(left)
        error_r = convergence_error_of(right)
        persp = perspective_score(error_l, error_r, width, height, config)
        tracer.event(f"Perspective score {persp:.1f} (errors L={error_l} R={error_r})")

    with tracer.span("render", module="pipeline"):
        overlay = render_overlay(strokes, lines, groups, left, right, width, height, config)
        image_data = encode_png_data_uri(overlay)

    checks = run_checks(strokes, lines, groups, left, right, config)

    result = AnalysisResult(
        image_data=image_data,
        line_scores=line_scores,
        average_line_score=average_score(line_scores),
        left_vp=vanishing_point_of(left),
        right_vp=vanishing_point_of(right),
        convergence_error_l=error_l or 0.0,
        convergence_error_r=error_r or 0.0,
        perspective_score=persp,
        lines=lines,
        groups=groups,
        left_estimate=left,
        right_estimate=right,
        checks=checks,
    )

    tracer.event(
        f"Analysis complete: average line score {result.average_line_score:.1f}, "
        f"perspective score {result.perspective_score:.1f}, {result.warning_count} warning(s)"
    )

    return result


def analyze_request(request, config=None):
    """Analyze a parsed AnalysisRequest."""
    return analyze_strokes(request.strokes, request.width, request.height, config)
