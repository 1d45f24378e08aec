"""
Moore-neighbor boundary walk over a boolean region mask.

The walk starts on a region pixel and repeatedly steps to the first
qualifying neighbor, probing the eight surrounding cells in a fixed
counter-clockwise order. After each step the probe order restarts two
positions behind the direction just taken.
"""

from collections import Counter
from typing import List, Tuple

import numpy as np

from .colors import Color
from .errors import OutOfBoundsError
from .matching import ColorMatcher, qualifying_mask
from .pixel_grid import PixelGrid

Point = Tuple[int, int]

# Counter-clockwise from the lower-left neighbor
NEIGHBOR_OFFSETS: Tuple[Point, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (1, 0),
    (1, 1), (0, 1), (-1, 1),
    (-1, 0),
)

NUM_NEIGHBORS = len(NEIGHBOR_OFFSETS)

# Added to the index of the step just taken to get the next probe start
BACKTRACK_SHIFT = 6

DEFAULT_MAX_REVISITS = 3


def trace_boundary(
    qualifies: np.ndarray,
    start: Point,
    max_revisits: int = DEFAULT_MAX_REVISITS,
) -> List[Point]:
    """
    Walk the boundary of the region containing start.

    The walk stops when it steps back onto start, when a full probe cycle
    finds no qualifying neighbor, or when the next pixel already appears
    max_revisits times in the output.

    Args:
        qualifies: Boolean (H, W) mask, True where the walk may step
        start: (x, y) pixel to start from
        max_revisits: Visit count at which a pixel ends the walk

    Returns:
        Visited (x, y) coordinates in walk order. The start pixel is only
        included when the walk closes on it. Empty for an isolated pixel.

    Example:
        >>> points = trace_boundary(mask, (1, 3))
        >>> points[-1] == (1, 3)
        True
    """
    if max_revisits < 1:
        raise ValueError(f"max_revisits must be >= 1, got {max_revisits}")

    height, width = qualifies.shape[:2]
    start_x, start_y = start
    trace_x, trace_y = start_x, start_y

    positions: List[Point] = []
    visits: Counter = Counter()
    probe_start = 0

    i = 0
    while i < NUM_NEIGHBORS:
        index = (probe_start + i) % NUM_NEIGHBORS
        dx, dy = NEIGHBOR_OFFSETS[index]
        tx, ty = trace_x + dx, trace_y + dy
        i += 1

        if tx < 0 or ty < 0 or tx >= width or ty >= height:
            continue
        if not qualifies[ty, tx]:
            continue

        target = (tx, ty)
        if visits[target] >= max_revisits:
            break

        trace_x, trace_y = tx, ty
        positions.append(target)
        visits[target] += 1
        probe_start = (index + BACKTRACK_SHIFT) % NUM_NEIGHBORS
        i = 0

        if tx == start_x and ty == start_y:
            break

    return positions


def trace_boundary_in_grid(
    grid: PixelGrid,
    start: Point,
    target: Color,
    matcher: ColorMatcher,
    max_revisits: int = DEFAULT_MAX_REVISITS,
) -> List[Point]:
    """
    Walk a boundary directly on a grid for one target color.

    Builds the qualifying mask for the whole grid first; use
    trace_boundary() with a cached mask when walking many regions.
    """
    if not grid.in_bounds(*start):
        raise OutOfBoundsError(start[0], start[1], grid.width, grid.height)
    mask = qualifying_mask(grid.raw(), target, matcher)
    return trace_boundary(mask, start, max_revisits)
