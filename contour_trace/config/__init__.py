"""
Configuration for the contour tracing engine.
"""

from .trace_config import TraceConfig, FAILURE_POLICIES, SCAN_ORDERS

__all__ = [
    "TraceConfig",
    "FAILURE_POLICIES",
    "SCAN_ORDERS",
]
