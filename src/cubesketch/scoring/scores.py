"""
Error-to-score mappings.

Both scores are exponential-decay curves clamped to [0, 100]: zero error
maps to 100 and the score falls off smoothly as error grows.
"""

import math

from cubesketch.config import ScoringConfig


def clamp_score(score):
    """Clamp a score to the [0, 100] range."""
    return min(100.0, max(0.0, score))


def straightness_score(rmse, config=None):
    """
    Map a stroke's RMSE (canvas units) to a 0-100 straightness score.

    score = 100 * exp(-rmse / rmse_decay)
    """
    scoring = config.scoring if config is not None else ScoringConfig()
    return clamp_score(100.0 * math.exp(-rmse / scoring.rmse_decay))


def perspective_score(error_l, error_r, width, height, config=None):
    """
    Map left/right convergence errors to a 0-100 perspective score.

    The averaged error is normalized by the canvas diagonal so the score does
    not depend on canvas resolution. ``None`` marks a side whose vanishing
    point could not be estimated; how it counts depends on
    ``scoring.missing_error_policy``:

    - "exclude": average only the available errors, 0 if neither exists
    - "zero": count a missing side as perfect convergence
    """
    scoring = config.scoring if config is not None else ScoringConfig()

    errors = [error_l, error_r]
    if scoring.missing_error_policy == "zero":
        errors = [0.0 if e is None else e for e in errors]
    else:
        errors = [e for e in errors if e is not None]
        if not errors:
            return 0.0

    avg_error = sum(errors) / len(errors)

    diagonal = math.sqrt(width * width + height * height)
    normalized_error = avg_error / diagonal

    return clamp_score(100.0 * math.exp(-normalized_error * scoring.perspective_sensitivity))


def average_score(scores):
    """Arithmetic mean of a list of scores, 0 for an empty list."""
    if not scores:
        return 0.0
    return sum(scores) / len(scores)
