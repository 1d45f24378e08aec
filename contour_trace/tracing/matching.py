"""
Color match policies used to decide which pixels belong to a region.

Two policies are supported:
- exact: all four channels equal
- tolerance: squared RGB distance below epsilon, both colors non-transparent

Fully transparent pixels never qualify for tracing under either policy.
"""

from typing import Callable, Optional, Union

import numpy as np

from .colors import Color

DEFAULT_EPSILON = 1e-10

MATCH_POLICIES = ("exact", "tolerance")

ColorPredicate = Callable[[Color, Color], bool]


class ColorMatcher:
    """
    Base color match policy.

    Subclasses implement matches() for single pairs and mask() for a
    whole (H, W, 4) array against one target.
    """

    name = "custom"

    def matches(self, color: Color, target: Color) -> bool:
        raise NotImplementedError

    def mask(self, data: np.ndarray, target: Color) -> np.ndarray:
        """
        Boolean (H, W) array of pixels that match target.

        The default evaluates matches() per pixel.
        """
        height, width = data.shape[:2]
        result = np.zeros((height, width), dtype=bool)
        for y in range(height):
            for x in range(width):
                r, g, b, a = data[y, x]
                result[y, x] = self.matches((float(r), float(g), float(b), float(a)), target)
        return result

    def __call__(self, color: Color, target: Color) -> bool:
        return self.matches(color, target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ExactMatcher(ColorMatcher):
    """All four channels must be equal."""

    name = "exact"

    def matches(self, color: Color, target: Color) -> bool:
        return tuple(color) == tuple(target)

    def mask(self, data: np.ndarray, target: Color) -> np.ndarray:
        return np.all(data == np.asarray(target, dtype=np.float64), axis=2)


class ToleranceMatcher(ColorMatcher):
    """
    Sum of squared RGB differences below epsilon.

    Alpha is ignored in the distance, but a color with alpha 0 on either
    side never matches.
    """

    name = "tolerance"

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        if epsilon <= 0:
            raise ValueError(f"epsilon must be > 0, got {epsilon}")
        self.epsilon = epsilon

    def matches(self, color: Color, target: Color) -> bool:
        if color[3] <= 0 or target[3] <= 0:
            return False
        distance = (
            (color[0] - target[0]) ** 2
            + (color[1] - target[1]) ** 2
            + (color[2] - target[2]) ** 2
        )
        return distance < self.epsilon

    def mask(self, data: np.ndarray, target: Color) -> np.ndarray:
        if target[3] <= 0:
            return np.zeros(data.shape[:2], dtype=bool)
        diff = data[:, :, :3] - np.asarray(target[:3], dtype=np.float64)
        distance = np.sum(diff * diff, axis=2)
        return (distance < self.epsilon) & (data[:, :, 3] > 0)

    def __repr__(self) -> str:
        return f"ToleranceMatcher(epsilon={self.epsilon!r})"


class PredicateMatcher(ColorMatcher):
    """Wrap a plain (color, target) -> bool callable."""

    def __init__(self, predicate: ColorPredicate):
        self.predicate = predicate

    def matches(self, color: Color, target: Color) -> bool:
        return bool(self.predicate(color, target))


def make_matcher(
    policy: Union[str, ColorMatcher, ColorPredicate] = "tolerance",
    epsilon: Optional[float] = None,
) -> ColorMatcher:
    """
    Build a matcher from a policy name, a matcher, or a predicate.

    Args:
        policy: "exact", "tolerance", a ColorMatcher, or a callable
        epsilon: Tolerance for the "tolerance" policy

    Raises:
        ValueError: If the policy name is unknown
    """
    if isinstance(policy, ColorMatcher):
        return policy
    if callable(policy):
        return PredicateMatcher(policy)
    if policy == "exact":
        return ExactMatcher()
    if policy == "tolerance":
        return ToleranceMatcher(DEFAULT_EPSILON if epsilon is None else epsilon)
    raise ValueError(f"Unknown match policy: {policy!r}. Available: {list(MATCH_POLICIES)}")


def qualifying_mask(data: np.ndarray, target: Color, matcher: ColorMatcher) -> np.ndarray:
    """
    Pixels a trace may step on: matching target and not fully transparent.
    """
    return matcher.mask(data, target) & (data[:, :, 3] > 0)
