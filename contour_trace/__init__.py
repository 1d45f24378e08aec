"""
Contour Trace Package

Extracts the boundary pixels of same-colored regions from raster images.
"""

from .tracing import (
    PixelGrid,
    ContourTracer,
    CancellationToken,
    Contour,
    TraceResult,
    TraceStatus,
    binarize,
    get_binarized_image,
    render_contours,
    composite_contours,
    find_contours,
)
from .config import TraceConfig

__version__ = "1.0.0"

__all__ = [
    "PixelGrid",
    "ContourTracer",
    "CancellationToken",
    "Contour",
    "TraceResult",
    "TraceStatus",
    "binarize",
    "get_binarized_image",
    "render_contours",
    "composite_contours",
    "find_contours",
    "TraceConfig",
]
