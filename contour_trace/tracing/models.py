"""
Data structures for contour tracing results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .colors import Color, to_hex
from .errors import TraceCancelledError, TraceFailureError

Point = Tuple[int, int]


class TraceStatus(Enum):
    """Outcome of a search."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class Contour:
    """
    One traced boundary.

    Attributes:
        points: Boundary coordinates in walk order. The start pixel itself
            appears only when the walk returned to it.
        start: Pixel the walk started from
    """
    points: List[Point]
    start: Point

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __contains__(self, point) -> bool:
        return tuple(point) in set(self.points)

    def is_closed(self) -> bool:
        """True if the walk ended back on its start pixel."""
        return bool(self.points) and self.points[-1] == self.start

    def row_extent(self, y: int) -> Optional[Tuple[int, int]]:
        """(min x, max x) of the points on row y, or None."""
        xs = [px for px, py in self.points if py == y]
        if not xs:
            return None
        return (min(xs), max(xs))

    def unique_points(self) -> List[Point]:
        """Points in walk order with repeats removed."""
        return list(dict.fromkeys(self.points))

    def bounding_box(self) -> Optional[Tuple[Point, Point]]:
        """((min x, min y), (max x, max y)), or None for an empty contour."""
        if not self.points:
            return None
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return ((min(xs), min(ys)), (max(xs), max(ys)))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "start": {"x": int(self.start[0]), "y": int(self.start[1])},
            "points": [[int(x), int(y)] for x, y in self.points],
            "point_count": len(self.points),
            "closed": self.is_closed(),
        }


@dataclass
class TraceResult:
    """
    Contours found by one search, in discovery order.

    Attributes:
        status: Whether the scan completed, was cancelled or failed
        contours: Traced boundaries
        target_color: Color that was searched for
        image_shape: (height, width) of the searched grid
        anomalies: Start pixels whose walk never touched the start row
        pixels_visited: Number of pixels the scan examined
        message: Human-readable reason for a non-completed status
    """
    status: TraceStatus
    contours: List[Contour]
    target_color: Color
    image_shape: Tuple[int, int] = field(default=(0, 0))
    anomalies: List[Point] = field(default_factory=list)
    pixels_visited: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == TraceStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status == TraceStatus.CANCELLED

    @property
    def failed(self) -> bool:
        return self.status == TraceStatus.FAILED

    def __len__(self) -> int:
        return len(self.contours)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self.contours)

    def all_points(self) -> List[Point]:
        """Every contour point, in discovery then walk order."""
        return [p for contour in self.contours for p in contour.points]

    def get_closed_contours(self) -> List[Contour]:
        return [c for c in self.contours if c.is_closed()]

    def raise_for_status(self) -> "TraceResult":
        """
        Raise if the search did not complete.

        Raises:
            TraceCancelledError: If the search was cancelled
            TraceFailureError: If the search stopped on a trace anomaly
        """
        if self.status == TraceStatus.CANCELLED:
            raise TraceCancelledError(self.message or "Search was cancelled")
        if self.status == TraceStatus.FAILED:
            raise TraceFailureError(self.message or "Search failed")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "status": self.status.value,
            "target_color": to_hex(self.target_color),
            "image_shape": {
                "height": int(self.image_shape[0]),
                "width": int(self.image_shape[1]),
            },
            "contour_count": len(self.contours),
            "closed_count": len(self.get_closed_contours()),
            "contours": [c.to_dict() for c in self.contours],
            "anomalies": [{"x": int(x), "y": int(y)} for x, y in self.anomalies],
            "pixels_visited": int(self.pixels_visited),
            "message": self.message,
        }
