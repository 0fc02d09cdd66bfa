"""
Artifact saving utilities for the CLI.

Writes the result record as JSON and unpacks the overlay data URI to a PNG
file next to it.
"""

import base64
import json
import os

from cubesketch.tracer import get_tracer

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_json(data, path, indent=2):
    """
    Save a dictionary or pydantic model to JSON.

    Models are dumped with their camelCase aliases.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json", by_alias=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_data_uri_png(data_uri, path):
    """
    Decode a base64 PNG data URI and write the image bytes.

    Raises ValueError if the payload is not a PNG data URI.
    """
    tracer = get_tracer()

    if not data_uri.startswith(PNG_DATA_URI_PREFIX):
        raise ValueError("Image payload is not a PNG data URI")

    ensure_dir(os.path.dirname(path))
    with open(path, "wb") as f:
        f.write(base64.b64decode(data_uri[len(PNG_DATA_URI_PREFIX):]))

    tracer.event(f"Saved image: {path}")
