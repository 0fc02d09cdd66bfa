"""
Validation rules for the cube sketch analyzer.

Two kinds of checks: boundary checks that decide whether a request can be
analyzed at all, and data-quality checks that run after the analysis and
report degenerate input without stopping it.
"""

import math

from cubesketch.geometry.line_fit import min_fit_points
from cubesketch.models import CheckResult, GroupKind, Severity
from cubesketch.tracer import get_tracer, trace

EXPECTED_GROUP_SIZE = 3


def validate_request(strokes, width, height, expected_strokes=9):
    """
    Check the shape of a request before analysis.

    Returns a list of error messages (empty if the request is usable).
    """
    errors = []

    if not strokes:
        errors.append("No strokes provided")
    elif len(strokes) != expected_strokes:
        errors.append(f"Expected exactly {expected_strokes} strokes, got {len(strokes)}")

    for idx, stroke in enumerate(strokes or []):
        if not all(math.isfinite(p.x) and math.isfinite(p.y) for p in stroke):
            errors.append(f"Stroke {idx} has a non-finite coordinate")

    for name, value in (("width", width), ("height", height)):
        if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
            errors.append(f"Canvas {name} must be a positive number, got {value!r}")

    return errors


@trace(label="run_checks")
def run_checks(strokes, lines, groups, left, right, config=None):
    """
    Run all data-quality checks on a finished analysis.

    Returns list of CheckResult.
    """
    tracer = get_tracer()

    checks = [
        check_stroke_points(strokes, min_fit_points(config)),
        check_group_sizes(groups),
        check_vanishing_point("left_vanishing_point", "left", left),
        check_vanishing_point("right_vanishing_point", "right", right),
    ]

    failed = sum(1 for c in checks if not c.passed)
    tracer.event(f"Checks complete: {len(checks)} run, {failed} failed")

    return checks


def check_stroke_points(strokes, min_points=2):
    """Check that every stroke has enough points to fit a line."""
    short = [idx for idx, stroke in enumerate(strokes) if len(stroke) < min_points]

    if short:
        return CheckResult(
            rule_id="stroke_points",
            severity=Severity.WARN,
            passed=False,
            message=f"{len(short)} stroke(s) have fewer than {min_points} points and were scored 0",
            evidence={"strokes": short, "min_points": min_points},
        )

    return CheckResult(
        rule_id="stroke_points",
        severity=Severity.WARN,
        passed=True,
        message=f"All strokes have at least {min_points} points",
    )


def check_group_sizes(groups):
    """
    Check that each perspective group got the 3 strokes a cube needs.

    Informational only: a stroke drawn at the wrong angle still gets scored.
    """
    sizes = {kind.value: len(groups.members(kind)) for kind in GroupKind}
    off = {name: size for name, size in sizes.items() if size != EXPECTED_GROUP_SIZE}

    if off:
        detail = ", ".join(f"{name}={size}" for name, size in off.items())
        return CheckResult(
            rule_id="group_sizes",
            severity=Severity.INFO,
            passed=False,
            message=f"Expected {EXPECTED_GROUP_SIZE} lines per group, got {detail}",
            evidence=sizes,
        )

    return CheckResult(
        rule_id="group_sizes",
        severity=Severity.INFO,
        passed=True,
        message=f"Each group has {EXPECTED_GROUP_SIZE} lines",
        evidence=sizes,
    )


def check_vanishing_point(rule_id, side, estimate):
    """Check that a side's vanishing point could be estimated."""
    if estimate is not None and estimate.kind == "estimated":
        return CheckResult(
            rule_id=rule_id,
            severity=Severity.WARN,
            passed=True,
            message=f"{side.capitalize()} vanishing point estimated",
            evidence={
                "x": estimate.centroid.x,
                "y": estimate.centroid.y,
                "convergence_error": estimate.convergence_error,
            },
        )

    reason = estimate.reason if estimate is not None else "not computed"
    return CheckResult(
        rule_id=rule_id,
        severity=Severity.WARN,
        passed=False,
        message=f"{side.capitalize()} vanishing point unavailable: {reason}",
    )
