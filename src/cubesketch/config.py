"""
Configuration management for the cube sketch analyzer.

Every tunable threshold of the analysis lives here as a named default.
YAML files override individual values; anything missing keeps its default.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class FittingConfig:
    """Configuration for per-stroke line fitting."""
    vertical_variance_threshold: float = 1.0  # variance of x, canvas units squared
    min_points: int = 2


@dataclass
class ClusteringConfig:
    """Configuration for angle-based grouping (open interval, degrees)."""
    vertical_min_angle: float = 70.0
    vertical_max_angle: float = 110.0


@dataclass
class IntersectionConfig:
    """Configuration for line-line intersection."""
    parallel_slope_tolerance: float = 0.001


@dataclass
class ScoringConfig:
    """Configuration for the error-to-score mappings."""
    rmse_decay: float = 5.0
    perspective_sensitivity: float = 10.0
    missing_error_policy: str = "exclude"  # "exclude" or "zero"


@dataclass
class RenderConfig:
    """Configuration for the overlay image. Colors are RGB."""
    stroke_color: tuple = (200, 200, 200)
    stroke_width: int = 2
    fit_color: tuple = (0, 200, 0)
    fit_width: int = 2
    ray_color: tuple = (255, 0, 0)
    ray_width: int = 1
    ray_alpha: int = 120
    marker_color: tuple = (255, 0, 0)
    marker_radius: int = 8


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class AnalysisConfig:
    """Complete analysis configuration."""
    fitting: FittingConfig = field(default_factory=FittingConfig)
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    intersection: IntersectionConfig = field(default_factory=IntersectionConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    expected_strokes: int = 9


SECTIONS = ("fitting", "clustering", "intersection", "scoring", "render", "tracing")

MISSING_ERROR_POLICIES = ("exclude", "zero")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = AnalysisConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    if config.scoring.missing_error_policy not in MISSING_ERROR_POLICIES:
        raise ValueError(
            f"Unknown missing_error_policy: {config.scoring.missing_error_policy!r} "
            f"(expected one of {', '.join(MISSING_ERROR_POLICIES)})"
        )

    for key in ("rmse_decay", "perspective_sensitivity"):
        value = getattr(config.scoring, key)
        if not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"scoring.{key} must be a positive number, got {value!r}")

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for section_name in SECTIONS:
        section = getattr(config, section_name)
        for key, value in (yaml_data.get(section_name) or {}).items():
            if not hasattr(section, key):
                continue
            if isinstance(getattr(section, key), tuple):
                value = tuple(value)
            setattr(section, key, value)

    if "expected_strokes" in yaml_data:
        config.expected_strokes = int(yaml_data["expected_strokes"])

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(AnalysisConfig())

    for key, value in yaml_data["render"].items():
        if isinstance(value, tuple):
            yaml_data["render"][key] = list(value)
    yaml_data["tracing"].pop("file_path")

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
