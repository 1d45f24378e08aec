"""
Luminance thresholding of a pixel grid into pure black and white.
"""

import logging

import numpy as np

from .colors import ColorLike, to_rgba
from .errors import NotBinarizedError
from .pixel_grid import PixelGrid

logger = logging.getLogger(__name__)

# Weighted luminance coefficients for r, g, b
LUMINANCE_WEIGHTS = (0.3, 0.59, 0.11)

DEFAULT_THRESHOLD = 0.5


def luminance(color: ColorLike) -> float:
    """Weighted luminance of a color, ignoring alpha."""
    r, g, b, _ = to_rgba(color)
    return r * LUMINANCE_WEIGHTS[0] + g * LUMINANCE_WEIGHTS[1] + b * LUMINANCE_WEIGHTS[2]


def binarize(grid: PixelGrid, threshold: float = DEFAULT_THRESHOLD) -> PixelGrid:
    """
    Map every pixel to white or black in place, keeping alpha.

    A pixel becomes white when its luminance is strictly greater than the
    threshold, black otherwise.

    Args:
        grid: Grid to transform
        threshold: Luminance threshold, clamped to [0, 1]

    Returns:
        The same grid, for chaining

    Raises:
        GridBusyError: If a search is reading the grid

    Example:
        >>> binarize(grid, 0.5)
        >>> get_binarized_image(grid)
    """
    t = min(max(float(threshold), 0.0), 1.0)
    if t != threshold:
        logger.debug(f"Binarization threshold {threshold} clamped to {t}")

    data = grid.to_rgba_array()
    v = (
        data[:, :, 0] * LUMINANCE_WEIGHTS[0]
        + data[:, :, 1] * LUMINANCE_WEIGHTS[1]
        + data[:, :, 2] * LUMINANCE_WEIGHTS[2]
    )
    white = v > t
    data[:, :, :3] = np.where(white[:, :, np.newaxis], 1.0, 0.0)

    grid.replace_data(data)
    grid.binarized = True

    logger.debug(
        f"Binarized {grid.width}x{grid.height} grid at threshold {t}: "
        f"{int(np.count_nonzero(white))} white pixels"
    )
    return grid


def get_binarized_image(grid: PixelGrid) -> np.ndarray:
    """
    Return a copy of the binarized pixels as an (H, W, 4) RGBA float array.

    Raises:
        NotBinarizedError: If binarize() has not been called on the grid
    """
    if not grid.binarized:
        raise NotBinarizedError("Grid has not been binarized; call binarize() first")
    return grid.to_rgba_array()


def is_binary(grid: PixelGrid) -> bool:
    """True if every pixel's RGB is exactly black or exactly white."""
    rgb = grid.raw()[:, :, :3]
    black = np.all(rgb == 0.0, axis=2)
    white = np.all(rgb == 1.0, axis=2)
    return bool(np.all(black | white))
