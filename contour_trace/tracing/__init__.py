"""
Contour Tracing Engine

Snapshots image pixels, optionally binarizes them, and traces the boundary
of every region of a target color with a Moore-neighbor walk.
"""

from .binarize import binarize, get_binarized_image, is_binary, luminance
from .colors import BLACK, CLEAR, WHITE, parse_color, to_rgba
from .errors import (
    ContourTraceError,
    GridBusyError,
    NotBinarizedError,
    OutOfBoundsError,
    TraceCancelledError,
    TraceFailureError,
)
from .matching import ExactMatcher, ToleranceMatcher, make_matcher
from .models import Contour, TraceResult, TraceStatus
from .neighbor_walk import NEIGHBOR_OFFSETS, trace_boundary
from .pixel_grid import PixelGrid
from .render import composite_contours, render_contours, search_and_render
from .tracer import CancellationToken, ContourTracer, find_contours

__all__ = [
    "binarize",
    "get_binarized_image",
    "is_binary",
    "luminance",
    "BLACK",
    "CLEAR",
    "WHITE",
    "parse_color",
    "to_rgba",
    "ContourTraceError",
    "GridBusyError",
    "NotBinarizedError",
    "OutOfBoundsError",
    "TraceCancelledError",
    "TraceFailureError",
    "ExactMatcher",
    "ToleranceMatcher",
    "make_matcher",
    "Contour",
    "TraceResult",
    "TraceStatus",
    "NEIGHBOR_OFFSETS",
    "trace_boundary",
    "PixelGrid",
    "composite_contours",
    "render_contours",
    "search_and_render",
    "CancellationToken",
    "ContourTracer",
    "find_contours",
]
