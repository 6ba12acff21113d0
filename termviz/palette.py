"""
The xterm 256-color palette and nearest-color lookup.
"""

from functools import lru_cache
from typing import Sequence, Tuple

import numpy as np

from .config import Config


SYSTEM_COLORS = [
    (0, 0, 0), (128, 0, 0), (0, 128, 0), (128, 128, 0),
    (0, 0, 128), (128, 0, 128), (0, 128, 128), (192, 192, 192),
    (128, 128, 128), (255, 0, 0), (0, 255, 0), (255, 255, 0),
    (0, 0, 255), (255, 0, 255), (0, 255, 255), (255, 255, 255),
]

CUBE_LEVELS = [0, 95, 135, 175, 215, 255]


def build_xterm_colors() -> np.ndarray:
    """
    Build the 256 xterm colors as a (256, 3) array.

    Index 0-15 are the system colors, 16-231 a 6x6x6 color cube and
    232-255 a grayscale ramp.
    """
    colors = list(SYSTEM_COLORS)
    for r in CUBE_LEVELS:
        for g in CUBE_LEVELS:
            for b in CUBE_LEVELS:
                colors.append((r, g, b))
    for i in range(24):
        level = 8 + 10 * i
        colors.append((level, level, level))
    return np.array(colors, dtype=np.int32)


class Xterm256Palette(object):
    """
    Maps arbitrary colors to the closest xterm 256-color index.

    Colors are RGB or RGBA tuples; RGBA is premultiplied by alpha before
    matching so fully transparent pixels map to black. Ties resolve to
    the lowest index.
    """

    def __init__(self, cache_size: int = None):
        self._colors = build_xterm_colors()
        if cache_size is None:
            cache_size = Config.PALETTE_CACHE_SIZE
        self._nearest = lru_cache(maxsize=cache_size)(self._nearest_index)

    def color(self, index: int) -> Tuple[int, int, int]:
        r, g, b = self._colors[index]
        return int(r), int(g), int(b)

    def index(self, color: Sequence[int]) -> int:
        r, g, b = int(color[0]), int(color[1]), int(color[2])
        if len(color) > 3:
            alpha = int(color[3])
            r, g, b = r * alpha // 255, g * alpha // 255, b * alpha // 255
        return self._nearest(r, g, b)

    def cache_info(self):
        """Hit/miss statistics of the nearest-color memo."""
        return self._nearest.cache_info()

    def _nearest_index(self, r: int, g: int, b: int) -> int:
        distances = ((self._colors - np.array((r, g, b), dtype=np.int32)) ** 2).sum(axis=1)
        return int(np.argmin(distances))
