"""
Tests for the Moore-neighbor boundary walk.
"""

import pytest
import numpy as np

from contour_trace.tracing.colors import BLACK, WHITE
from contour_trace.tracing.errors import OutOfBoundsError
from contour_trace.tracing.matching import ExactMatcher, ToleranceMatcher, qualifying_mask
from contour_trace.tracing.neighbor_walk import (
    NEIGHBOR_OFFSETS,
    trace_boundary,
    trace_boundary_in_grid,
)

from tests.fixtures.grid_fixtures import (
    create_filled_square,
    create_hollow_ring,
    grid_from_ascii,
    square_perimeter,
)


def black_mask(grid):
    return qualifying_mask(grid.raw(), BLACK, ToleranceMatcher())


class TestNeighborOffsets:
    """Tests for the neighbor probe table."""

    def test_order_is_counter_clockwise_from_lower_left(self):
        """Test the exact probe order."""
        assert NEIGHBOR_OFFSETS == (
            (-1, -1), (0, -1), (1, -1),
            (1, 0),
            (1, 1), (0, 1), (-1, 1),
            (-1, 0),
        )

    def test_covers_all_eight_neighbors(self):
        """Test that every surrounding cell appears exactly once."""
        expected = {(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)} - {(0, 0)}
        assert set(NEIGHBOR_OFFSETS) == expected
        assert len(NEIGHBOR_OFFSETS) == 8


class TestTraceBoundary:
    """Tests for trace_boundary function."""

    def test_ring_walk_order(self):
        """Test the exact walk around a 3x3 ring."""
        mask = black_mask(create_hollow_ring())

        points = trace_boundary(mask, (1, 3))

        assert points == [
            (1, 2), (1, 1), (2, 1), (3, 1),
            (3, 2), (3, 3), (2, 3), (1, 3),
        ]

    @pytest.mark.parametrize("size", [3, 4, 5, 8])
    def test_filled_square_closes_on_perimeter(self, size):
        """Test that a filled square walk returns to start along its perimeter."""
        grid = create_filled_square(size)
        start = (1, size)  # left end of the first scanned row

        points = trace_boundary(black_mask(grid), start)

        assert points[-1] == start
        assert len(points) == 4 * size - 4
        assert set(points) == square_perimeter(1, 1, size)

    def test_isolated_pixel_returns_empty(self):
        """Test that a pixel with no matching neighbors yields no points."""
        grid = grid_from_ascii([
            "...",
            ".#.",
            "...",
        ])

        assert trace_boundary(black_mask(grid), (1, 1)) == []

    def test_single_pixel_grid_returns_empty(self):
        """Test that all neighbors out of bounds yields no points."""
        grid = grid_from_ascii(["#"])

        assert trace_boundary(black_mask(grid), (0, 0)) == []

    def test_vertical_line_walks_back_up(self):
        """Test that a one-pixel-wide line is walked down and back."""
        grid = grid_from_ascii([
            ".#.",
            ".#.",
            ".#.",
        ])

        points = trace_boundary(black_mask(grid), (1, 2))

        assert points == [(1, 1), (1, 0), (1, 1), (1, 2)]

    def test_revisit_limit_stops_walk(self):
        """Test that max_revisits=1 cuts the walk at the first repeat."""
        grid = grid_from_ascii([
            ".#.",
            ".#.",
            ".#.",
        ])

        points = trace_boundary(black_mask(grid), (1, 2), max_revisits=1)

        assert points == [(1, 1), (1, 0)]

    def test_no_pixel_exceeds_revisit_limit(self):
        """Test that no coordinate appears more than max_revisits times."""
        grid = grid_from_ascii([
            ".....",
            ".###.",
            ".#.#.",
            ".###.",
            ".....",
        ])
        mask = black_mask(grid)

        for limit in (1, 2, 3, 5):
            points = trace_boundary(mask, (3, 3), max_revisits=limit)
            counts = {p: points.count(p) for p in points}
            assert max(counts.values()) <= limit

    def test_transparent_pixels_are_not_walked(self):
        """Test that alpha-0 pixels never qualify."""
        grid = grid_from_ascii([
            "...",
            ".# ",
            "...",
        ])

        assert trace_boundary(black_mask(grid), (1, 1)) == []

    def test_invalid_revisit_limit(self):
        """Test that max_revisits below 1 raises ValueError."""
        mask = np.zeros((3, 3), dtype=bool)

        with pytest.raises(ValueError, match="max_revisits must be >= 1"):
            trace_boundary(mask, (1, 1), max_revisits=0)


class TestTraceBoundaryInGrid:
    """Tests for trace_boundary_in_grid function."""

    def test_matches_mask_based_walk(self):
        """Test that the grid convenience gives the same walk."""
        grid = create_hollow_ring()

        direct = trace_boundary_in_grid(grid, (1, 3), BLACK, ExactMatcher())

        assert direct == trace_boundary(black_mask(grid), (1, 3))

    def test_white_region_walk(self):
        """Test walking a region of another color."""
        grid = create_hollow_ring()

        # The white center is enclosed by the ring
        assert trace_boundary_in_grid(grid, (2, 2), WHITE, ExactMatcher()) == []

    def test_out_of_bounds_start(self):
        """Test that a start outside the grid raises OutOfBoundsError."""
        grid = create_hollow_ring()

        with pytest.raises(OutOfBoundsError):
            trace_boundary_in_grid(grid, (5, 0), BLACK, ExactMatcher())
