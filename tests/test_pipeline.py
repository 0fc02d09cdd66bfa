"""Integration tests for the full analysis pipeline."""

import pytest
from pydantic import ValidationError

from cubesketch.config import AnalysisConfig
from cubesketch.errors import ShapeError
from cubesketch.models import AnalysisRequest, Point
from cubesketch.pipeline import analyze_request, analyze_strokes


class TestPerfectCube:
    """End-to-end checks on an exact cube projection."""

    def test_scores(self, perfect_cube):
        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        assert len(result.line_scores) == 9
        assert result.average_line_score == pytest.approx(100.0)
        assert result.convergence_error_l == pytest.approx(0.0, abs=1e-6)
        assert result.convergence_error_r == pytest.approx(0.0, abs=1e-6)
        assert result.perspective_score == pytest.approx(100.0)

    def test_vanishing_points(self, perfect_cube):
        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        assert result.left_vp.x == pytest.approx(perfect_cube.left_vp[0], abs=1e-6)
        assert result.left_vp.y == pytest.approx(perfect_cube.left_vp[1], abs=1e-6)
        assert result.right_vp.x == pytest.approx(perfect_cube.right_vp[0], abs=1e-6)
        assert result.right_vp.y == pytest.approx(perfect_cube.right_vp[1], abs=1e-6)

    def test_groups_and_checks(self, perfect_cube):
        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        assert result.groups.vertical == perfect_cube.verticals
        assert result.groups.left == perfect_cube.left
        assert result.groups.right == perfect_cube.right
        assert all(check.passed for check in result.checks)
        assert result.warning_count == 0

    def test_image_attached(self, perfect_cube):
        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        assert result.image_data.startswith("data:image/png;base64,")

    def test_deterministic(self, perfect_cube):
        """Running twice on identical input gives identical results."""
        first = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)
        second = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        assert first.model_dump() == second.model_dump()

    def test_analyze_request(self, cube_payload):
        request = AnalysisRequest.model_validate(cube_payload)

        result = analyze_request(request)

        assert result.perspective_score == pytest.approx(100.0)


class TestShapeValidation:
    """Requests that cannot be analyzed are rejected up front."""

    def test_wrong_stroke_count(self, perfect_cube):
        with pytest.raises(ShapeError) as exc_info:
            analyze_strokes(perfect_cube.strokes[:8], 1000, 800)

        assert "Expected exactly 9 strokes, got 8" in exc_info.value.problems

    def test_no_strokes(self):
        with pytest.raises(ShapeError, match="No strokes"):
            analyze_strokes([], 1000, 800)

    def test_non_positive_canvas(self, perfect_cube):
        with pytest.raises(ShapeError, match="width"):
            analyze_strokes(perfect_cube.strokes, 0, 800)

    def test_shape_error_is_value_error(self, perfect_cube):
        with pytest.raises(ValueError):
            analyze_strokes(perfect_cube.strokes[:3], 1000, 800)

    def test_non_finite_coordinate(self, perfect_cube):
        strokes = [list(s) for s in perfect_cube.strokes]
        strokes[1][0] = Point.model_construct(x=float("nan"), y=250.0)

        with pytest.raises(ShapeError) as exc_info:
            analyze_strokes(strokes, 1000, 800)

        assert exc_info.value.problems == ["Stroke 1 has a non-finite coordinate"]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_point_rejects_non_finite(self, value):
        with pytest.raises(ValidationError):
            Point(x=value, y=0.0)

    def test_expected_count_from_config(self, perfect_cube):
        config = AnalysisConfig()
        config.expected_strokes = 8

        result = analyze_strokes(perfect_cube.strokes[:8], 1000, 800, config)

        assert len(result.line_scores) == 8


class TestDegenerateInput:
    """Degenerate strokes and groups are tolerated and reported."""

    def test_single_point_stroke(self, perfect_cube):
        strokes = list(perfect_cube.strokes)
        strokes[4] = [Point(x=300.0, y=300.0)]

        result = analyze_strokes(strokes, perfect_cube.width, perfect_cube.height)

        assert result.line_scores[4] == 0.0
        assert result.lines[4].degenerate
        assert result.left_vp is not None
        assert result.left_vp.x == pytest.approx(perfect_cube.left_vp[0], abs=1e-6)

        failed = {c.rule_id for c in result.checks if not c.passed}
        assert "stroke_points" in failed

    def test_min_points_above_stroke_length(self, perfect_cube):
        """Strokes shorter than fitting.min_points are scored 0 and reported."""
        config = AnalysisConfig()
        config.fitting.min_points = 20

        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height, config)

        assert result.line_scores == [0.0] * 9
        check = next(c for c in result.checks if c.rule_id == "stroke_points")
        assert not check.passed
        assert check.evidence == {"strokes": list(range(9)), "min_points": 20}
        assert "fewer than 20 points" in check.message

    def test_missing_right_group(self, perfect_cube):
        """With every right stroke made vertical, only the left side scores."""
        strokes = list(perfect_cube.strokes)
        for idx, x in zip(perfect_cube.right, (700.0, 750.0, 800.0)):
            strokes[idx] = [Point(x=x, y=400.0 + 10.0 * i) for i in range(5)]

        result = analyze_strokes(strokes, perfect_cube.width, perfect_cube.height)

        assert result.right_vp is None
        assert result.right_estimate.kind == "unavailable"
        assert result.convergence_error_r == 0.0
        assert result.perspective_score == pytest.approx(100.0)

        failed = {c.rule_id for c in result.checks if not c.passed}
        assert "right_vanishing_point" in failed
        assert "group_sizes" in failed

    def test_both_groups_missing(self, perfect_cube):
        strokes = [[Point(x=100.0 * (i + 1), y=100.0 + 10.0 * j) for j in range(5)] for i in range(9)]

        result = analyze_strokes(strokes, perfect_cube.width, perfect_cube.height)

        assert result.left_vp is None
        assert result.right_vp is None
        assert result.perspective_score == 0.0
        assert result.average_line_score == pytest.approx(100.0)

    def test_both_groups_missing_zero_policy(self, perfect_cube):
        strokes = [[Point(x=100.0 * (i + 1), y=100.0 + 10.0 * j) for j in range(5)] for i in range(9)]
        config = AnalysisConfig()
        config.scoring.missing_error_policy = "zero"

        result = analyze_strokes(strokes, perfect_cube.width, perfect_cube.height, config)

        assert result.perspective_score == 100.0


class TestSerialization:
    """Result records use the client's field names."""

    def test_camel_case_aliases(self, perfect_cube):
        result = analyze_strokes(perfect_cube.strokes, perfect_cube.width, perfect_cube.height)

        data = result.model_dump(mode="json", by_alias=True)

        for key in ("imageData", "lineScores", "averageLineScore", "leftVP", "rightVP",
                    "convergenceErrorL", "convergenceErrorR", "perspectiveScore"):
            assert key in data
        assert data["leftVP"]["x"] == pytest.approx(-200.0, abs=1e-6)
        assert data["lines"][0]["kind"] == "vertical"
