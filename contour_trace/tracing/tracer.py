"""
ContourTracer: scans a grid for one color and traces every region boundary.

Rows are scanned from y = H-1 down to 0. Each unvisited matching pixel
starts a boundary walk; pixels already owned by a traced contour make the
scan jump past that contour on the current row. A walk that reaches a
pixel of an earlier contour is discarded, so no pixel belongs to two
contours of one search.
"""

import logging
import threading
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from .colors import ColorLike, to_hex, to_rgba
from .matching import ColorMatcher, ColorPredicate, make_matcher, qualifying_mask
from .models import Contour, TraceResult, TraceStatus
from .neighbor_walk import trace_boundary
from .pixel_grid import PixelGrid

if TYPE_CHECKING:
    from ..config.trace_config import TraceConfig

logger = logging.getLogger(__name__)

Point = Tuple[int, int]
ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """
    Cooperative cancellation flag checked by the scan before every pixel.

    Safe to set from another thread.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class _SkipIndex:
    """
    Ownership of boundary pixels by contour, with per-row x extents.

    The first contour to claim a pixel keeps it.
    """

    def __init__(self):
        self._owner: Dict[Point, int] = {}
        self._extents: List[Dict[int, Tuple[int, int]]] = []

    def add(self, points: List[Point]) -> int:
        index = len(self._extents)
        extents: Dict[int, Tuple[int, int]] = {}
        for x, y in points:
            self._owner.setdefault((x, y), index)
            if y in extents:
                lo, hi = extents[y]
                extents[y] = (min(lo, x), max(hi, x))
            else:
                extents[y] = (x, x)
        self._extents.append(extents)
        return index

    def owner(self, x: int, y: int) -> Optional[int]:
        return self._owner.get((x, y))

    def first_owned(self, points: List[Point]) -> Optional[int]:
        """Owner of the first already-claimed point in points, or None."""
        for point in points:
            index = self._owner.get(point)
            if index is not None:
                return index
        return None

    def row_extent(self, index: int, y: int) -> Optional[Tuple[int, int]]:
        return self._extents[index].get(y)


class ContourTracer:
    """
    Finds the boundaries of all regions of one color in a PixelGrid.

    Example:
        >>> tracer = ContourTracer(grid)
        >>> result = tracer.search((0, 0, 0))
        >>> for contour in result.contours:
        ...     print(contour.start, len(contour))
    """

    def __init__(
        self,
        grid: PixelGrid,
        config: Optional["TraceConfig"] = None,
        matcher: Optional[Union[ColorMatcher, ColorPredicate]] = None,
    ):
        """
        Initialize the tracer.

        Args:
            grid: Pixels to search. Read-only while a search runs.
            config: Tracing configuration. If None, uses defaults.
            matcher: Override the config's match policy with a matcher or
                a (color, target) -> bool predicate.
        """
        if config is None:
            from ..config.trace_config import TraceConfig

            config = TraceConfig.default()

        self.grid = grid
        self.config = config
        self.matcher = make_matcher(
            matcher if matcher is not None else config.match_policy,
            config.epsilon,
        )

    def search(
        self,
        target_color: ColorLike,
        cancel_token: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> TraceResult:
        """
        Trace every region of target_color.

        Args:
            target_color: Color to look for
            cancel_token: Checked before each pixel; when set, the search
                returns a cancelled result with the contours found so far
            progress: Called as progress(rows_done, total_rows) after each row

        Returns:
            TraceResult. Completed with no contours when nothing matches.
        """
        target = to_rgba(target_color)
        width, height = self.grid.width, self.grid.height
        right_to_left = self.config.scan_order == "right_to_left"

        contours: List[Contour] = []
        anomalies: List[Point] = []
        skips = _SkipIndex()
        visited = 0
        status = TraceStatus.COMPLETED
        message = ""

        with self.grid.reading():
            qualifies = qualifying_mask(self.grid.raw(), target, self.matcher)

            if not qualifies.any():
                logger.info(f"No pixels match {to_hex(target)}")

            rows_done = 0
            for y in range(height - 1, -1, -1):
                if status != TraceStatus.COMPLETED:
                    break

                x = width - 1 if right_to_left else 0
                while 0 <= x < width:
                    if cancel_token is not None and cancel_token.cancelled:
                        status = TraceStatus.CANCELLED
                        message = f"Search cancelled after {rows_done} of {height} rows"
                        break

                    visited += 1
                    if not qualifies[y, x]:
                        x = x - 1 if right_to_left else x + 1
                        continue

                    owner = skips.owner(x, y)
                    if owner is not None:
                        x = self._jump(x, skips.row_extent(owner, y), right_to_left)
                        x = x - 1 if right_to_left else x + 1
                        continue

                    points = trace_boundary(qualifies, (x, y), self.config.max_revisits)
                    if not points:
                        logger.debug(f"Skipping isolated pixel at ({x}, {y})")
                        x = x - 1 if right_to_left else x + 1
                        continue

                    # A walk that touches a claimed pixel is inside a region
                    # that has already been traced
                    retraced = skips.first_owned(points)
                    if retraced is not None:
                        logger.debug(
                            f"Walk from ({x}, {y}) retraces contour {retraced + 1}; skipping"
                        )
                        x = x - 1 if right_to_left else x + 1
                        continue

                    contour = Contour(points=points, start=(x, y))
                    extent = contour.row_extent(y)
                    if extent is None:
                        if self.config.abort_on_failure:
                            status = TraceStatus.FAILED
                            message = f"Boundary walk from ({x}, {y}) never returned to row {y}"
                            logger.error(f"Fail search contour: {message}")
                            break
                        logger.warning(
                            f"Boundary walk from ({x}, {y}) never returned to row {y}; "
                            f"skipping region"
                        )
                        anomalies.append((x, y))
                        x = x - 1 if right_to_left else x + 1
                        continue

                    skips.add(points)
                    contours.append(contour)
                    logger.debug(
                        f"Contour {len(contours)} from ({x}, {y}): "
                        f"{len(points)} points, closed={contour.is_closed()}"
                    )
                    x = self._jump(x, extent, right_to_left)
                    x = x - 1 if right_to_left else x + 1

                if status == TraceStatus.COMPLETED:
                    rows_done += 1
                    if progress is not None:
                        progress(rows_done, height)

        if status == TraceStatus.CANCELLED:
            logger.info(f"{message}; returning {len(contours)} contour(s)")
        elif status == TraceStatus.COMPLETED:
            logger.info(
                f"Found {len(contours)} contour(s) of {to_hex(target)} "
                f"in {width}x{height} grid"
            )

        return TraceResult(
            status=status,
            contours=contours,
            target_color=target,
            image_shape=(height, width),
            anomalies=anomalies,
            pixels_visited=visited,
            message=message,
        )

    @staticmethod
    def _jump(x: int, extent: Tuple[int, int], right_to_left: bool) -> int:
        """Scan position after passing a contour's extent on the current row."""
        lo, hi = extent
        if right_to_left:
            return min(x, lo)
        return max(x, hi)

    def qualifying_pixels(self, target_color: ColorLike) -> np.ndarray:
        """Boolean (H, W) mask of pixels a walk for target_color may visit."""
        return qualifying_mask(self.grid.raw(), to_rgba(target_color), self.matcher)


def find_contours(
    grid: PixelGrid,
    target_color: ColorLike,
    config: Optional["TraceConfig"] = None,
) -> List[List[Point]]:
    """
    Trace all regions of one color and return their point lists.

    Raises:
        TraceFailureError: If the search stops on a trace anomaly
    """
    result = ContourTracer(grid, config).search(target_color)
    result.raise_for_status()
    return [list(c.points) for c in result.contours]
