"""
Overlay rendering for analyzed sketches.

Draws, on a transparent canvas the size of the drawing surface:
1. the original strokes in light gray
2. each fitted ideal line across its stroke's own span
3. translucent rays from each converging stroke to its vanishing point,
   with an opaque marker on the vanishing point

Vanishing points often land far outside the canvas, so every segment is
clipped to the canvas before rasterizing. Shapes are drawn aliased
(cv2.LINE_8) and the ray layer is alpha-composited over the rest.
"""

import base64

import cv2
import numpy as np
from shapely.geometry import LineString, Point as ShapelyPoint, box

from cubesketch.config import RenderConfig
from cubesketch.errors import EncodingError
from cubesketch.models import compute_bounds
from cubesketch.tracer import get_tracer, trace


@trace(label="render_overlay")
def render_overlay(strokes, lines, groups, left, right, width, height, config=None):
    """
    Render the analysis overlay.

    Args:
        strokes: list of strokes (lists of Point)
        lines: fitted line per stroke
        groups: LineGroups
        left: vanishing-point estimate for the left group (or None)
        right: vanishing-point estimate for the right group (or None)
        width: canvas width
        height: canvas height
        config: AnalysisConfig (optional)

    Returns:
        RGBA uint8 array of shape (height, width, 4)
    """
    tracer = get_tracer()
    render = config.render if config is not None else RenderConfig()

    img_w = max(1, int(width))
    img_h = max(1, int(height))
    canvas = np.zeros((img_h, img_w, 4), dtype=np.uint8)
    frame = box(-1.0, -1.0, float(img_w), float(img_h))

    # Original strokes
    stroke_color = _rgba(render.stroke_color)
    for stroke in strokes:
        if not stroke:
            continue
        coords = [(p.x, p.y) for p in stroke]
        if len(set(coords)) == 1:
            x, y = coords[0]
            if frame.covers(ShapelyPoint(x, y)):
                cv2.circle(canvas, (int(round(x)), int(round(y))), max(1, render.stroke_width // 2),
                           stroke_color, -1, cv2.LINE_8)
        else:
            _draw_polyline_clipped(canvas, frame, coords, stroke_color, render.stroke_width)

    # Ideal lines
    fit_color = _rgba(render.fit_color)
    for stroke, line in zip(strokes, lines):
        if len(stroke) < 2 or line.degenerate:
            continue
        p0, p1 = fitted_segment(stroke, line)
        _draw_clipped(canvas, frame, p0, p1, fit_color, render.fit_width)

    # Rays to vanishing points
    rays = np.zeros_like(canvas)
    markers = []
    for indices, estimate in ((groups.left, left), (groups.right, right)):
        if estimate is None or estimate.kind != "estimated":
            continue
        vp = (estimate.centroid.x, estimate.centroid.y)
        for idx in indices:
            stroke = strokes[idx]
            if not stroke:
                continue
            _draw_clipped(rays, frame, (stroke[0].x, stroke[0].y), vp,
                          _rgba(render.ray_color), render.ray_width)
        markers.append(vp)

    _composite_over(canvas, rays, render.ray_alpha / 255.0)

    marker_color = _rgba(render.marker_color)
    for vx, vy in markers:
        r = render.marker_radius
        if -r <= vx <= img_w + r and -r <= vy <= img_h + r:
            cv2.circle(canvas, (int(round(vx)), int(round(vy))), r, marker_color, -1, cv2.LINE_8)
        else:
            tracer.event(f"Vanishing point ({vx:.0f}, {vy:.0f}) is off canvas, marker skipped", level="DEBUG")

    tracer.event(f"Rendered overlay {img_w}x{img_h} with {len(markers)} vanishing point(s)")

    return canvas


def fitted_segment(stroke, line):
    """
    Endpoints of a fitted line across its stroke's bounding span.

    Vertical lines span the stroke's y-range at the fitted x; oblique lines
    are evaluated at the stroke's min and max x.
    """
    min_x, min_y, max_x, max_y = compute_bounds(stroke)

    if line.kind == "vertical":
        return (line.x, min_y), (line.x, max_y)
    return (min_x, line.y_at(min_x)), (max_x, line.y_at(max_x))


def clip_segment(frame, p0, p1):
    """
    Clip the segment p0-p1 to a shapely frame.

    Returns a pair of endpoints, or None if nothing of it is inside.
    """
    if p0 == p1:
        return None

    clipped = LineString([p0, p1]).intersection(frame)
    if clipped.is_empty or clipped.geom_type != "LineString":
        return None

    coords = list(clipped.coords)
    return coords[0], coords[-1]


def _draw_polyline_clipped(img, frame, coords, color, thickness):
    clipped = LineString(coords).intersection(frame)
    for part in getattr(clipped, "geoms", [clipped]):
        if part.is_empty or part.geom_type != "LineString":
            continue
        pts = np.round(np.asarray(part.coords, dtype=np.float64)).astype(np.int32)
        cv2.polylines(img, [pts], isClosed=False, color=color, thickness=thickness, lineType=cv2.LINE_8)


def _draw_clipped(img, frame, p0, p1, color, thickness):
    segment = clip_segment(frame, p0, p1)
    if segment is None:
        return
    a, b = segment
    cv2.line(img, (int(round(a[0])), int(round(a[1]))), (int(round(b[0])), int(round(b[1]))),
             color, thickness, cv2.LINE_8)


def _composite_over(canvas, layer, opacity):
    """Alpha-composite layer over canvas in place, scaling layer alpha by opacity."""
    src_a = layer[..., 3:4].astype(np.float64) / 255.0 * opacity
    if not np.any(src_a):
        return

    dst_a = canvas[..., 3:4].astype(np.float64) / 255.0
    out_a = src_a + dst_a * (1.0 - src_a)

    src_rgb = layer[..., :3].astype(np.float64)
    dst_rgb = canvas[..., :3].astype(np.float64)
    with np.errstate(invalid="ignore", divide="ignore"):
        out_rgb = (src_rgb * src_a + dst_rgb * dst_a * (1.0 - src_a)) / out_a
    out_rgb = np.nan_to_num(out_rgb)

    canvas[..., :3] = np.clip(np.round(out_rgb), 0, 255).astype(np.uint8)
    canvas[..., 3:4] = np.clip(np.round(out_a * 255.0), 0, 255).astype(np.uint8)


def _rgba(rgb, alpha=255):
    return (int(rgb[0]), int(rgb[1]), int(rgb[2]), int(alpha))


def encode_png_data_uri(image):
    """
    Encode an RGBA overlay as a base64 PNG data URI.

    Raises EncodingError if OpenCV cannot encode the image.
    """
    bgra = cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)
    ok, buf = cv2.imencode(".png", bgra)
    if not ok:
        raise EncodingError(f"Failed to encode {image.shape[1]}x{image.shape[0]} overlay as PNG")
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode("ascii")

