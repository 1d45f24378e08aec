"""
Exception types raised by the tracing engine.
"""


class ContourTraceError(Exception):
    """Base exception for contour tracing errors."""

    pass


class OutOfBoundsError(ContourTraceError, IndexError):
    """Raised when a pixel coordinate lies outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        super().__init__(
            f"Pixel ({x}, {y}) is outside the {width}x{height} grid"
        )


class NotBinarizedError(ContourTraceError):
    """Raised when binarized output is requested before binarization."""

    pass


class GridBusyError(ContourTraceError):
    """Raised when a grid is mutated while a search is reading it."""

    pass


class TraceFailureError(ContourTraceError):
    """Raised for a search that stopped on a trace anomaly."""

    pass


class TraceCancelledError(ContourTraceError):
    """Raised for a search that was cancelled before completion."""

    pass
