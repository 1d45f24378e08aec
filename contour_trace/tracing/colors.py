"""
Color values and conversions.

Colors are RGBA tuples of floats in [0, 1]. Integer input is read as 0-255.
"""

import numbers
from typing import Dict, Sequence, Tuple, Union

Color = Tuple[float, float, float, float]
ColorLike = Union[Sequence[int], Sequence[float]]

BLACK: Color = (0.0, 0.0, 0.0, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)
CLEAR: Color = (0.0, 0.0, 0.0, 0.0)

NAMED_COLORS: Dict[str, Color] = {
    "black": BLACK,
    "white": WHITE,
    "red": (1.0, 0.0, 0.0, 1.0),
    "green": (0.0, 1.0, 0.0, 1.0),
    "blue": (0.0, 0.0, 1.0, 1.0),
    "clear": CLEAR,
}


def to_rgba(color: ColorLike) -> Color:
    """
    Normalize a 3- or 4-channel color to an RGBA float tuple.

    Args:
        color: (r, g, b) or (r, g, b, a). All-integer values are read
            as 0-255, anything else as 0.0-1.0.

    Returns:
        (r, g, b, a) floats, alpha defaulting to 1.0

    Raises:
        ValueError: If the channel count or a channel value is invalid
    """
    channels = list(color)
    if len(channels) not in (3, 4):
        raise ValueError(f"Color must have 3 or 4 channels, got {len(channels)}")

    if all(isinstance(c, numbers.Integral) and not isinstance(c, bool) for c in channels):
        for c in channels:
            if not (0 <= c <= 255):
                raise ValueError(f"Integer channels must be 0-255, got {c}")
        channels = [int(c) / 255.0 for c in channels]
    else:
        channels = [float(c) for c in channels]
        for c in channels:
            if not (0.0 <= c <= 1.0):
                raise ValueError(f"Float channels must be 0.0-1.0, got {c}")

    if len(channels) == 3:
        channels.append(1.0)

    return (channels[0], channels[1], channels[2], channels[3])


def parse_color(text: str) -> Color:
    """
    Parse a color from a command-line style string.

    Accepts a name ("black", "red", ...), hex ("#ff8800" or "#ff880080"),
    or comma-separated channels ("255,136,0" or "1.0,0.5,0,1").
    """
    value = text.strip().lower()

    if value in NAMED_COLORS:
        return NAMED_COLORS[value]

    if value.startswith("#"):
        digits = value[1:]
        if len(digits) not in (6, 8):
            raise ValueError(f"Hex color must be #rrggbb or #rrggbbaa, got {text!r}")
        try:
            channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid hex color: {text!r}") from None
        return to_rgba(channels)

    parts = [p.strip() for p in value.split(",")]
    try:
        if all(p.isdigit() for p in parts):
            return to_rgba([int(p) for p in parts])
        return to_rgba([float(p) for p in parts])
    except ValueError as e:
        raise ValueError(f"Invalid color {text!r}: {e}") from e


def to_hex(color: ColorLike) -> str:
    """Format a color as #rrggbbaa."""
    rgba = to_rgba(color)
    return "#" + "".join(f"{int(round(c * 255)):02x}" for c in rgba)
