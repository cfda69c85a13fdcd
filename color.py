# color.py

"""
Color Utilities

Linear interpolation between two '#RRGGBB' colors. Used for the sky gradient
(as a function of peak altitude) and for particle colors.

Data Contract:
- Inputs are 6-hex-digit strings with a leading '#'.
- Outputs are (R, G, B) tuples of ints in [0, 255].
- Invariants: Malformed input never produces NaN or raises; the first color
  is handed back unchanged instead.
"""

import logging
import math
import string

logger = logging.getLogger("rocket_escape")


def parse_hex_color(color):
    """
    Parses '#RRGGBB' into an (R, G, B) tuple.
    Raises ValueError if the string is not in that form.
    """
    if (not isinstance(color, str) or len(color) != 7 or not color.startswith('#')
            or not all(ch in string.hexdigits for ch in color[1:])):
        raise ValueError(f"Not a #RRGGBB color: {color!r}")
    return tuple(int(color[i:i + 2], 16) for i in (1, 3, 5))


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; channels must round .5 upward
    return int(math.floor(value + 0.5))


def interpolate_color(color1, color2, factor: float):
    """
    Blends color1 towards color2 by factor (0 -> color1, 1 -> color2).
    Each channel is interpolated independently and rounded half up.

    If either color cannot be parsed, or factor is not a finite number,
    color1 is returned exactly as it was given.
    """
    try:
        r1, g1, b1 = parse_hex_color(color1)
        r2, g2, b2 = parse_hex_color(color2)
    except ValueError:
        logger.debug(f"interpolate_color: malformed input {color1!r}, {color2!r}")
        return color1

    if not math.isfinite(factor):
        return color1

    r = _round_half_up(r1 + factor * (r2 - r1))
    g = _round_half_up(g1 + factor * (g2 - g1))
    b = _round_half_up(b1 + factor * (b2 - b1))
    return (r, g, b)
