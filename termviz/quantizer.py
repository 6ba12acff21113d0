import math
from typing import List

import numpy as np
from PIL import Image
from tqdm import tqdm

from .config import Config
from .models import CompositedFrame, RenderedFrame, RenderTarget


class FrameQuantizer(object):
    """
    Resizes composited rasters to the resolved grid and maps every pixel
    to a palette index.

    The palette is any object with an ``index(color) -> int`` method,
    called once per output pixel in row-major order.
    """

    def __init__(self, palette, width: int, height: int, delay_multiplier: float = None):
        self._palette = palette
        self._width = width
        self._height = height
        if delay_multiplier is None:
            delay_multiplier = Config.DEFAULT_DELAY_MULTIPLIER
        self._delay_multiplier = delay_multiplier

    def render_delay(self, delay_ms: int) -> int:
        """
        Convert a source delay to a display delay.

        Drawing a frame in the terminal is itself slow, so the source
        timing is compressed by a factor of 10 before the multiplier is
        applied.
        """
        return max(0, int(math.ceil(delay_ms / 10.0 * self._delay_multiplier)))

    def quantize(self, image: Image.Image, delay_ms: int = 0) -> RenderedFrame:
        """
        Quantize a single composited raster.

        Args:
            image: Full-canvas raster
            delay_ms: Source delay of the raster in milliseconds

        Returns:
            RenderedFrame with a (height, width) index buffer
        """
        picture = np.zeros((self._height, self._width), dtype=np.uint8)
        if self._width > 0 and self._height > 0:
            scaled = image.convert('RGBA').resize(
                (self._width, self._height), Image.Resampling.LANCZOS
            )
            pixels = np.asarray(scaled)
            for y in range(self._height):
                for x in range(self._width):
                    picture[y, x] = self._palette.index(tuple(pixels[y, x]))

        return RenderedFrame(picture, self.render_delay(delay_ms))

    def build_target(self, frames: List[CompositedFrame], loop_count: int) -> RenderTarget:
        """Quantize every composited frame and assemble the RenderTarget."""
        rendered = []
        for frame in tqdm(
            frames,
            desc="Quantizing frames",
            unit="frame",
            disable=not Config.SHOW_PROGRESS,
            leave=False,
        ):
            rendered.append(self.quantize(frame.image, frame.delay_ms))
        return RenderTarget(rendered, loop_count, self._width, self._height)
