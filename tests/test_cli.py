"""Tests for the command-line interface."""

import json
import os

import cv2

from cubesketch.cli import main


def write_payload(temp_dir, payload):
    path = os.path.join(temp_dir, "strokes.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    return path


class TestCli:
    """Tests for CLI commands."""

    def test_analyze_writes_outputs(self, temp_dir, cube_payload, capsys):
        input_path = write_payload(temp_dir, cube_payload)
        out_dir = os.path.join(temp_dir, "out")

        code = main(["analyze", "--input", input_path, "--out", out_dir])

        assert code == 0
        with open(os.path.join(out_dir, "result.json"), encoding="utf-8") as f:
            result = json.load(f)
        assert result["perspectiveScore"] > 99.99
        assert len(result["lineScores"]) == 9

        overlay = cv2.imread(os.path.join(out_dir, "overlay.png"), cv2.IMREAD_UNCHANGED)
        assert overlay.shape == (800, 1000, 4)

        assert "Perspective score: 100.0" in capsys.readouterr().out

    def test_analyze_rejects_wrong_count(self, temp_dir, cube_payload, capsys):
        cube_payload["strokes"] = cube_payload["strokes"][:5]
        input_path = write_payload(temp_dir, cube_payload)

        code = main(["analyze", "--input", input_path, "--out", os.path.join(temp_dir, "out")])

        assert code == 1
        assert "Expected exactly 9 strokes" in capsys.readouterr().err

    def test_analyze_missing_input(self, temp_dir):
        code = main(["analyze", "--input", os.path.join(temp_dir, "missing.json"), "--out", temp_dir])

        assert code == 1

    def test_analyze_with_trace_file(self, temp_dir, cube_payload):
        from cubesketch.tracer import configure_tracer

        input_path = write_payload(temp_dir, cube_payload)
        trace_path = os.path.join(temp_dir, "trace.log")

        try:
            code = main([
                "analyze", "--input", input_path, "--out", os.path.join(temp_dir, "out"),
                "--trace", "--trace-file", trace_path,
            ])
        finally:
            configure_tracer(enabled=False)

        assert code == 0
        with open(trace_path, encoding="utf-8") as f:
            log = f.read()
        assert "analyze_strokes" in log
        assert "estimate_vanishing_point" in log

    def test_init_config(self, temp_dir):
        path = os.path.join(temp_dir, "config.yaml")

        assert main(["init-config", "--out", path]) == 0
        assert os.path.exists(path)
