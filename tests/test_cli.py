"""
Tests for the contour-trace command-line interface.
"""

import pytest
import subprocess
import sys
import os
import json
import cv2
import numpy as np

from tests.fixtures.grid_fixtures import create_hollow_ring, create_two_squares

PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "contour_trace", *args],
        capture_output=True,
        text=True,
        cwd=PROJECT_ROOT,
    )


class TestTraceCommand:
    """Tests for the trace CLI command."""

    @pytest.fixture
    def ring_image_path(self, tmp_path):
        """Write the 5x5 ring as a PNG."""
        image_path = tmp_path / "ring.png"
        cv2.imwrite(str(image_path), create_hollow_ring().to_image())
        yield str(image_path)

    @pytest.fixture
    def squares_image_path(self, tmp_path):
        """Write the two-square grid as a PNG."""
        image_path = tmp_path / "squares.png"
        cv2.imwrite(str(image_path), create_two_squares().to_image())
        yield str(image_path)

    def test_trace_produces_json_output(self, ring_image_path):
        """Test that trace prints valid JSON with one closed contour."""
        result = run_cli("trace", ring_image_path, "-o", "json")

        assert result.returncode == 0

        output = json.loads(result.stdout)
        assert output["image_dimensions"] == {"width": 5, "height": 5}
        assert output["result"]["status"] == "completed"
        assert output["result"]["contour_count"] == 1
        assert output["result"]["contours"][0]["point_count"] == 8
        assert output["result"]["contours"][0]["closed"] is True

    def test_trace_reports_config(self, squares_image_path):
        """Test that command-line overrides appear in the reported config."""
        result = run_cli(
            "trace", squares_image_path,
            "--match", "exact",
            "--max-revisits", "5",
            "--scan-order", "right_to_left",
        )

        assert result.returncode == 0

        output = json.loads(result.stdout)
        assert output["config"]["match_policy"] == "exact"
        assert output["config"]["max_revisits"] == 5
        starts = [c["start"] for c in output["result"]["contours"]]
        assert starts == [{"x": 3, "y": 8}, {"x": 7, "y": 3}]

    def test_trace_with_yaml_config(self, ring_image_path, tmp_path):
        """Test loading settings from a YAML file."""
        config_path = tmp_path / "trace.yaml"
        config_path.write_text("contour_trace:\n  failure_policy: abort\n  binarize: true\n")

        result = run_cli("trace", ring_image_path, "--config", str(config_path))

        assert result.returncode == 0
        output = json.loads(result.stdout)
        assert output["config"]["failure_policy"] == "abort"
        assert output["config"]["binarize"] is True
        assert output["result"]["contour_count"] == 1

    def test_trace_visual_writes_image(self, ring_image_path, tmp_path):
        """Test that visual mode writes the contour image."""
        output_path = tmp_path / "contour.png"

        result = run_cli(
            "trace", ring_image_path,
            "-o", "visual",
            "--output-path", str(output_path),
            "--contour-color", "red",
        )

        assert result.returncode == 0
        assert "Contour image saved to" in result.stdout
        assert output_path.exists()

        image = cv2.imread(str(output_path), cv2.IMREAD_UNCHANGED)
        assert image.shape[:2] == (5, 5)
        # BGRA red on the ring, white in the center
        assert tuple(image[1, 1]) == (0, 0, 255, 255)
        assert tuple(image[2, 2]) == (255, 255, 255, 255)

    def test_trace_other_color(self, ring_image_path):
        """Test tracing a color that is absent."""
        result = run_cli("trace", ring_image_path, "--color", "#ff0000")

        assert result.returncode == 0
        output = json.loads(result.stdout)
        assert output["result"]["contour_count"] == 0

    def test_trace_finds_top_region_first(self, tmp_path):
        """Test that regions nearer the top of the PNG are reported first."""
        image = np.full((8, 4, 3), 255, dtype=np.uint8)
        image[1:3, 0:2] = 0
        image[5:7, 2:4] = 0
        image_path = tmp_path / "stacked.png"
        cv2.imwrite(str(image_path), image)

        result = run_cli("trace", str(image_path))

        assert result.returncode == 0
        output = json.loads(result.stdout)
        starts = [c["start"] for c in output["result"]["contours"]]
        assert starts == [{"x": 0, "y": 6}, {"x": 2, "y": 2}]

    def test_trace_invalid_path_returns_error(self):
        """Test that a missing image returns an error code."""
        result = run_cli("trace", "nonexistent.png", "-o", "json")

        assert result.returncode == 1
        assert "Error" in result.stderr

    def test_trace_invalid_color_returns_error(self, ring_image_path):
        """Test that an unparseable color returns an error code."""
        result = run_cli("trace", ring_image_path, "--color", "purple")

        assert result.returncode == 1
        assert "Error" in result.stderr


class TestBinarizeCommand:
    """Tests for the binarize CLI command."""

    @pytest.fixture
    def gray_image_path(self, tmp_path):
        """Write a 4x4 image of dark and light gray halves."""
        image = np.full((4, 4, 3), 200, dtype=np.uint8)
        image[:, :2] = 40
        image_path = tmp_path / "gray.png"
        cv2.imwrite(str(image_path), image)
        yield str(image_path)

    def test_binarize_writes_black_and_white(self, gray_image_path, tmp_path):
        """Test that only black and white remain."""
        output_path = tmp_path / "bw.png"

        result = run_cli("binarize", gray_image_path, "--output-path", str(output_path))

        assert result.returncode == 0
        assert "Binarized image saved to" in result.stdout

        image = cv2.imread(str(output_path), cv2.IMREAD_UNCHANGED)
        assert set(np.unique(image[:, :, :3])) <= {0, 255}
        assert tuple(image[0, 0]) == (0, 0, 0, 255)
        assert tuple(image[0, 3]) == (255, 255, 255, 255)

    def test_binarize_invalid_path_returns_error(self):
        """Test that a missing image returns an error code."""
        result = run_cli("binarize", "nonexistent.png")

        assert result.returncode == 1
        assert "Error" in result.stderr


class TestMainEntry:
    """Tests for calling main() in-process."""

    def test_no_command_prints_help(self, capsys):
        """Test that running without a command shows help."""
        from contour_trace.cli import main

        assert main([]) == 0
        assert "trace" in capsys.readouterr().out
