from __future__ import annotations

import math
import zlib

"""Chemical color palette.

Seven colors running magenta -> teal -> orange, built from linear RGB
interpolations between anchor colors. Adjacent segments share their boundary
color, so each segment after the first drops its leading color; the closing
orange -> magenta segment contributes no interior colors.
"""

__all__ = [
    "generate_colors",
    "build_palette",
    "PALETTE",
    "ordinal_color",
    "hash_color",
]


def _parse_hex(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"not a hex color: {color!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _channel(a: int, b: int, t: float) -> int:
    # round half up, clamp to byte range
    return max(0, min(255, math.floor(a + (b - a) * t + 0.5)))


def generate_colors(color0: str, color1: str, n: int) -> list[str]:
    """Return n colors evenly spaced from color0 to color1 (inclusive).

    Colors are formatted as "rgb(r, g, b)".
    """
    if n < 1:
        return []
    start = _parse_hex(color0)
    end = _parse_hex(color1)
    colors = []
    for i in range(n):
        t = i / (n - 1) if n > 1 else 0.0
        r, g, b = (_channel(a, z, t) for a, z in zip(start, end))
        colors.append(f"rgb({r}, {g}, {b})")
    return colors


def build_palette() -> tuple[str, ...]:
    colors = generate_colors("#CC00CC", "#009090", 4)
    colors += generate_colors("#009090", "#FF6600", 4)[1:]
    colors += generate_colors("#FF9933", "#CC00CC", 2)[1:-1]
    return tuple(colors)


PALETTE: tuple[str, ...] = build_palette()


def ordinal_color(index: int, palette: tuple[str, ...] = PALETTE) -> str:
    return palette[index % len(palette)]


def hash_color(key: str, palette: tuple[str, ...] = PALETTE) -> str:
    """Color derived from the key itself (crc32, stable across processes)."""
    return palette[zlib.crc32(key.encode("utf-8")) % len(palette)]
