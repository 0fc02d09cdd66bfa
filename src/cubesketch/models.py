"""
Pydantic data models for the cube sketch analyzer.

Fitted lines and vanishing-point estimates are tagged variants keyed on
``kind``; consumers branch on the tag instead of testing for sentinel values.
Result records serialize with camelCase aliases to match the web client.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Point(BaseModel):
    """A 2D canvas coordinate. y grows downward."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)


Stroke = List[Point]


class GroupKind(str, Enum):
    """Perspective group a fitted line belongs to."""
    VERTICAL = "vertical"
    LEFT = "left"
    RIGHT = "right"


class Severity(str, Enum):
    """Severity levels for data-quality checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class ObliqueLine(BaseModel):
    """Least-squares line y = slope * x + intercept."""
    kind: Literal["oblique"] = "oblique"
    slope: float
    intercept: float
    angle_degrees: float
    rmse: float = Field(ge=0.0)
    straightness_score: float = Field(ge=0.0, le=100.0)
    degenerate: bool = False

    model_config = ConfigDict(frozen=True)

    def y_at(self, x):
        return self.slope * x + self.intercept


class VerticalLine(BaseModel):
    """Vertical line x = const, fitted when a stroke has almost no x spread."""
    kind: Literal["vertical"] = "vertical"
    x: float
    angle_degrees: float = 90.0
    rmse: float = Field(ge=0.0)
    straightness_score: float = Field(ge=0.0, le=100.0)
    degenerate: bool = False

    model_config = ConfigDict(frozen=True)


FittedLine = Annotated[Union[ObliqueLine, VerticalLine], Field(discriminator="kind")]


class LineGroups(BaseModel):
    """Partition of line indices into the three perspective groups."""
    vertical: List[int] = Field(default_factory=list)
    left: List[int] = Field(default_factory=list)
    right: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def members(self, kind):
        """Indices belonging to the given GroupKind."""
        return getattr(self, GroupKind(kind).value)


class EstimatedVanishingPoint(BaseModel):
    """Centroid of a group's pairwise intersections and their spread."""
    kind: Literal["estimated"] = "estimated"
    centroid: Point
    convergence_error: float = Field(ge=0.0)
    intersections: List[Point] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class UnavailableVanishingPoint(BaseModel):
    """A group that could not produce a vanishing point."""
    kind: Literal["unavailable"] = "unavailable"
    reason: str

    model_config = ConfigDict(frozen=True)


VanishingPointEstimate = Annotated[
    Union[EstimatedVanishingPoint, UnavailableVanishingPoint],
    Field(discriminator="kind"),
]


class CheckResult(BaseModel):
    """Result of a single data-quality check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class AnalysisRequest(BaseModel):
    """Parsed stroke data handed to the analysis core."""
    strokes: List[Stroke]
    width: float
    height: float

    model_config = ConfigDict(extra="ignore")


class AnalysisResult(BaseModel):
    """Terminal record of one analysis. Created once, never mutated."""
    image_data: str
    line_scores: List[float]
    average_line_score: float
    left_vp: Optional[Point] = Field(default=None, alias="leftVP")
    right_vp: Optional[Point] = Field(default=None, alias="rightVP")
    convergence_error_l: float = Field(default=0.0, alias="convergenceErrorL")
    convergence_error_r: float = Field(default=0.0, alias="convergenceErrorR")
    perspective_score: float
    lines: List[FittedLine] = Field(default_factory=list)
    groups: LineGroups = Field(default_factory=LineGroups)
    left_estimate: Optional[VanishingPointEstimate] = None
    right_estimate: Optional[VanishingPointEstimate] = None
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


def vanishing_point_of(estimate):
    """Centroid of an estimate, or None when unavailable."""
    if estimate is not None and estimate.kind == "estimated":
        return estimate.centroid
    return None


def convergence_error_of(estimate):
    """Convergence error of an estimate, or None when unavailable."""
    if estimate is not None and estimate.kind == "estimated":
        return estimate.convergence_error
    return None


def compute_bounds(points):
    """
    Bounding box of a list of Points.

    Returns (min_x, min_y, max_x, max_y).
    """
    if not points:
        return (0.0, 0.0, 0.0, 0.0)

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def compute_centroid(points):
    """Arithmetic mean of a non-empty list of Points."""
    n = len(points)
    return Point(x=sum(p.x for p in points) / n, y=sum(p.y for p in points) / n)
