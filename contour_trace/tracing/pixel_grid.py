"""
Snapshot of image pixels with bounds-checked access.

The grid copies its source once at construction. Coordinates are (x, y)
with the pixel stored at array[y, x]; channels are RGBA floats in [0, 1].

y grows upward: from_image() and to_image() flip rows, so y = 0 is the
bottom row of an image file and the neighbor order runs counter-clockwise
on screen.
"""

from contextlib import contextmanager
from typing import Sequence, Tuple

import cv2
import numpy as np

from .colors import Color, ColorLike, to_rgba
from .errors import GridBusyError, OutOfBoundsError


def _unit_float(rgba: np.ndarray) -> np.ndarray:
    """Copy pixel data to float64 in [0, 1], scaling unsigned integers by their max."""
    if np.issubdtype(rgba.dtype, np.unsignedinteger):
        return rgba.astype(np.float64) / float(np.iinfo(rgba.dtype).max)
    if not np.issubdtype(rgba.dtype, np.floating):
        raise ValueError(
            f"Unsupported pixel dtype {rgba.dtype}; use floats in [0, 1] or unsigned integers"
        )

    data = np.array(rgba, dtype=np.float64, copy=True)
    if not np.all((data >= 0.0) & (data <= 1.0)):
        raise ValueError("Float pixel values must lie in [0, 1]")
    return data


class PixelGrid:
    """
    Fixed-size RGBA pixel cache.

    The only mutations are set() and binarization; both are refused while
    a search holds the grid through reading().

    Example:
        >>> grid = PixelGrid.from_image(cv2.imread("shape.png", cv2.IMREAD_UNCHANGED))
        >>> grid.get(0, 0)
        (1.0, 1.0, 1.0, 1.0)
    """

    def __init__(self, rgba: np.ndarray):
        """
        Create a grid from an (H, W, 4) RGBA array.

        Args:
            rgba: Float array in [0, 1], or an unsigned integer array
                scaled to its full range (0-255 for uint8). The data is
                copied and row 0 becomes y = 0.

        Raises:
            ValueError: If the array shape is not (H, W, 4) with H, W > 0,
                the dtype is not float or unsigned integer, or a float
                value lies outside [0, 1]
        """
        if rgba.ndim != 3 or rgba.shape[2] != 4:
            raise ValueError(f"Expected an (H, W, 4) array, got shape {rgba.shape}")
        if rgba.shape[0] == 0 or rgba.shape[1] == 0:
            raise ValueError(f"Grid dimensions must be positive, got {rgba.shape[:2]}")

        self._data = _unit_float(rgba)
        self._height, self._width = self._data.shape[:2]
        self._readers = 0
        self.version = 0
        self.binarized = False

    # Constructors

    @classmethod
    def from_image(cls, image: np.ndarray) -> "PixelGrid":
        """
        Create a grid from an OpenCV image.

        Args:
            image: Array from cv2.imread, grayscale (H, W),
                BGR (H, W, 3) or BGRA (H, W, 4)

        Returns:
            PixelGrid in RGBA order, bottom image row at y = 0
        """
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            raise ValueError(f"Unsupported image shape: {image.shape}")

        return cls(np.flipud(rgba))

    @classmethod
    def filled(cls, width: int, height: int, color: ColorLike) -> "PixelGrid":
        """Create a grid with every pixel set to one color."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        data = np.empty((height, width, 4), dtype=np.float64)
        data[:, :] = to_rgba(color)
        return cls(data)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[ColorLike]]) -> "PixelGrid":
        """
        Create a grid from nested color lists.

        rows[y][x] is the color at (x, y).
        """
        if not rows or not rows[0]:
            raise ValueError("Grid must have at least one row and one column")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"Row {y} has {len(row)} pixels, expected {width}")
        data = np.array([[to_rgba(c) for c in row] for row in rows], dtype=np.float64)
        return cls(data)

    def copy(self) -> "PixelGrid":
        """Return an independent grid with the same pixels and binarized flag."""
        clone = PixelGrid(self._data)
        clone.binarized = self.binarized
        return clone

    # Properties

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """(height, width), matching numpy image shape order."""
        return (self._height, self._width)

    @property
    def is_busy(self) -> bool:
        """True while at least one search is reading the grid."""
        return self._readers > 0

    # Access

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def _check_bounds(self, x: int, y: int):
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self._width, self._height)

    def get(self, x: int, y: int) -> Color:
        """
        Get the color at (x, y).

        Raises:
            OutOfBoundsError: If (x, y) lies outside the grid
        """
        self._check_bounds(x, y)
        r, g, b, a = self._data[y, x]
        return (float(r), float(g), float(b), float(a))

    def alpha(self, x: int, y: int) -> float:
        self._check_bounds(x, y)
        return float(self._data[y, x, 3])

    def set(self, x: int, y: int, color: ColorLike):
        """
        Overwrite the color at (x, y).

        A 3-channel color keeps the pixel's current alpha; a 4-channel
        color replaces it.

        Raises:
            OutOfBoundsError: If (x, y) lies outside the grid
            GridBusyError: If a search is reading the grid
        """
        self._check_bounds(x, y)
        self.ensure_writable()
        channels = list(color)
        rgba = to_rgba(channels)
        if len(channels) == 3:
            rgba = (rgba[0], rgba[1], rgba[2], float(self._data[y, x, 3]))
        self._data[y, x] = rgba
        self.version += 1

    # Bulk data

    def to_rgba_array(self) -> np.ndarray:
        """Return a copy of the pixel data as an (H, W, 4) float array."""
        return self._data.copy()

    def to_image(self) -> np.ndarray:
        """Return the pixels as a BGRA uint8 array for cv2.imwrite, top row first."""
        rgba = np.clip(np.rint(self._data * 255.0), 0, 255).astype(np.uint8)
        rgba = np.ascontiguousarray(np.flipud(rgba))
        return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)

    def replace_data(self, rgba: np.ndarray):
        """
        Replace all pixel data in place with an array of the same shape.

        Raises:
            GridBusyError: If a search is reading the grid
            ValueError: If the shape differs or values are outside [0, 1]
        """
        self.ensure_writable()
        if rgba.shape != self._data.shape:
            raise ValueError(
                f"Replacement shape {rgba.shape} does not match grid shape {self._data.shape}"
            )
        self._data[...] = _unit_float(rgba)
        self.version += 1

    def raw(self) -> np.ndarray:
        """Read-only view of the pixel array."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    # Read guard

    def ensure_writable(self):
        if self._readers > 0:
            raise GridBusyError(
                f"Grid is being read by {self._readers} search(es); mutation refused"
            )

    @contextmanager
    def reading(self):
        """Hold the grid read-only for the duration of the block."""
        self._readers += 1
        try:
            yield self
        finally:
            self._readers -= 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelGrid(width={self._width}, height={self._height}, version={self.version})"
