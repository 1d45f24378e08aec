"""
Configuration for contour tracing.

Covers the color match policy, walk termination, anomaly handling, scan
order, the optional binarization pre-pass and the rendering color.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..tracing.colors import BLACK, Color, parse_color, to_hex, to_rgba
from ..tracing.matching import DEFAULT_EPSILON, MATCH_POLICIES

FAILURE_POLICIES = ("continue", "abort")
SCAN_ORDERS = ("left_to_right", "right_to_left")


@dataclass
class TraceConfig:
    """
    Settings for a tracing session.

    Attributes:
        match_policy: "tolerance" (squared RGB distance) or "exact"
        epsilon: Distance below which colors match under "tolerance"
        max_revisits: Visits of one pixel that end a boundary walk
        failure_policy: "continue" skips a region whose walk misses its
            start row, "abort" stops the search with a failed status
        scan_order: "left_to_right" jumps to a contour's row maximum,
            "right_to_left" scans each row backwards and jumps to the minimum
        binarize: Whether to binarize the image before searching
        threshold: Binarization luminance threshold (clamped to 0-1 when used)
        contour_color: Color used to paint contours when rendering
    """
    match_policy: str = "tolerance"
    epsilon: float = DEFAULT_EPSILON
    max_revisits: int = 3
    failure_policy: str = "continue"
    scan_order: str = "left_to_right"
    binarize: bool = False
    threshold: float = 0.5
    contour_color: Color = field(default=BLACK)

    def __post_init__(self):
        """Validate configuration values."""
        self._validate()

    def _validate(self):
        """Validate all configuration values."""
        if self.match_policy not in MATCH_POLICIES:
            raise ValueError(
                f"match_policy must be one of {list(MATCH_POLICIES)}, got {self.match_policy!r}"
            )

        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {self.epsilon}")

        if self.max_revisits < 1:
            raise ValueError(f"max_revisits must be >= 1, got {self.max_revisits}")

        if self.failure_policy not in FAILURE_POLICIES:
            raise ValueError(
                f"failure_policy must be one of {list(FAILURE_POLICIES)}, got {self.failure_policy!r}"
            )

        if self.scan_order not in SCAN_ORDERS:
            raise ValueError(
                f"scan_order must be one of {list(SCAN_ORDERS)}, got {self.scan_order!r}"
            )

        # Accept hex strings and 0-255 tuples from YAML
        if isinstance(self.contour_color, str):
            object.__setattr__(self, "contour_color", parse_color(self.contour_color))
        else:
            object.__setattr__(self, "contour_color", to_rgba(self.contour_color))

    @property
    def abort_on_failure(self) -> bool:
        return self.failure_policy == "abort"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "match_policy": self.match_policy,
            "epsilon": self.epsilon,
            "max_revisits": self.max_revisits,
            "failure_policy": self.failure_policy,
            "scan_order": self.scan_order,
            "binarize": self.binarize,
            "threshold": self.threshold,
            "contour_color": to_hex(self.contour_color),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TraceConfig":
        """Create from dictionary (e.g., from YAML config)."""
        return cls(
            match_policy=data.get("match_policy", "tolerance"),
            epsilon=float(data.get("epsilon", DEFAULT_EPSILON)),
            max_revisits=data.get("max_revisits", 3),
            failure_policy=data.get("failure_policy", "continue"),
            scan_order=data.get("scan_order", "left_to_right"),
            binarize=data.get("binarize", False),
            threshold=data.get("threshold", 0.5),
            contour_color=data.get("contour_color", BLACK),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "TraceConfig":
        """Load configuration from YAML file."""
        import yaml

        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get("contour_trace", data))

    @classmethod
    def default(cls) -> "TraceConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def legacy(cls) -> "TraceConfig":
        """
        Configuration reproducing the first release of the tracer.

        Exact color equality, walks cut at five revisits, and a search that
        stops at the first anomaly.
        """
        return cls(
            match_policy="exact",
            max_revisits=5,
            failure_policy="abort",
        )
