"""
Paint traced contours onto a blank canvas or over a source grid.
"""

import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .colors import BLACK, WHITE, ColorLike, to_rgba
from .errors import OutOfBoundsError
from .models import Contour, TraceResult
from .pixel_grid import PixelGrid
from .tracer import ContourTracer

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
ContourSource = Union[TraceResult, Iterable[Contour], Iterable[Sequence[Point]]]


def _iter_points(contours: ContourSource) -> Iterable[Point]:
    for contour in contours:
        points = contour.points if isinstance(contour, Contour) else contour
        for x, y in points:
            yield (int(x), int(y))


def _paint(data: np.ndarray, contours: ContourSource, color: ColorLike) -> int:
    """Paint contour points into an (H, W, 4) array; returns points painted."""
    rgba = np.asarray(to_rgba(color), dtype=np.float64)
    height, width = data.shape[:2]
    painted = 0
    for x, y in _iter_points(contours):
        if not (0 <= x < width and 0 <= y < height):
            raise OutOfBoundsError(x, y, width, height)
        data[y, x] = rgba
        painted += 1
    return painted


def render_contours(
    contours: ContourSource,
    width: int,
    height: int,
    contour_color: ColorLike = BLACK,
    background: ColorLike = WHITE,
) -> PixelGrid:
    """
    Draw contours on a plain canvas.

    Args:
        contours: A TraceResult, Contour objects, or lists of (x, y) points
        width: Canvas width
        height: Canvas height
        contour_color: Color for contour pixels
        background: Color for every other pixel

    Returns:
        New PixelGrid with the contours painted
    """
    canvas = PixelGrid.filled(width, height, background)
    data = canvas.to_rgba_array()
    painted = _paint(data, contours, contour_color)

    if painted == 0:
        logger.info("Contour not found.")

    canvas.replace_data(data)
    return canvas


def composite_contours(
    source: PixelGrid,
    contours: ContourSource,
    contour_color: ColorLike = BLACK,
) -> PixelGrid:
    """
    Draw contours over a copy of source; the source is left unchanged.
    """
    output = source.copy()
    data = output.to_rgba_array()
    painted = _paint(data, contours, contour_color)

    if painted == 0:
        logger.info("Contour not found.")

    output.replace_data(data)
    return output


def search_and_render(
    grid: PixelGrid,
    target_color: ColorLike,
    contour_color: ColorLike = BLACK,
    config=None,
) -> Optional[PixelGrid]:
    """
    Search for one color and render the result on a white canvas.

    Returns:
        The rendered grid, or None if the search was cancelled or failed
    """
    result = ContourTracer(grid, config).search(target_color)
    if not result.success:
        logger.error(f"Search did not complete ({result.status.value}): {result.message}")
        return None

    return render_contours(result, grid.width, grid.height, contour_color)
