"""
Stroke request loading.

Reads the JSON payload the drawing client posts ({strokes, width, height})
from disk, for offline analysis with the CLI.
"""

import json
import os

from cubesketch.models import AnalysisRequest
from cubesketch.tracer import get_tracer, trace


@trace(label="load_request")
def load_request(path):
    """
    Load an AnalysisRequest from a JSON file.

    Raises FileNotFoundError if path does not exist.
    Raises pydantic.ValidationError if the payload is malformed.
    """
    tracer = get_tracer()

    if not os.path.exists(path):
        raise FileNotFoundError(f"Stroke file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    request = AnalysisRequest.model_validate(data)

    point_count = sum(len(s) for s in request.strokes)
    tracer.event(
        f"Loaded {len(request.strokes)} strokes ({point_count} points) "
        f"on {request.width:g}x{request.height:g} canvas"
    )

    return request
